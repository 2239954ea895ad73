"""Records produced by the enrichment providers."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import RecordModel


class PriceStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    NOT_CONFIGURED = "not_configured"


class CompanyProfile(RecordModel):
    isin: str
    name: str
    ticker: Optional[str] = None
    exchange: Optional[str] = None
    market_capitalization: Optional[float] = None
    ipo_date: Optional[date] = None
    website: Optional[str] = None
    industry: Optional[str] = None


class PriceQuote(RecordModel):
    """A quote whose ``price`` is only meaningful when ``status`` is available."""

    symbol: str
    price: Decimal = Decimal("0")
    status: PriceStatus = PriceStatus.UNAVAILABLE

    @property
    def is_available(self) -> bool:
        return self.status == PriceStatus.AVAILABLE


class MarketNewsArticle(RecordModel):
    id: int
    headline: str
    summary: str = ""
    source: str = ""
    url: str
    image: Optional[str] = None
    published_at: datetime = Field(..., description="Publication time (UTC)")


__all__ = [
    "CompanyProfile",
    "MarketNewsArticle",
    "PriceQuote",
    "PriceStatus",
]
