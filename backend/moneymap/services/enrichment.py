"""Concurrent profile and price lookups that degrade per item instead of failing the batch.

Each ISIN or symbol is looked up on its own. Results are collected with
``asyncio.gather(return_exceptions=True)`` and split into successes and
logged failures.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from moneymap.schemas.market import CompanyProfile, PriceQuote, PriceStatus

logger = logging.getLogger(__name__)


class ProfileProvider(Protocol):
    """Anything that can resolve an ISIN to a company profile."""

    @property
    def is_configured(self) -> bool:
        ...

    async def company_profile(self, isin: str) -> CompanyProfile:
        ...


class QuoteProvider(Protocol):
    @property
    def is_configured(self) -> bool:
        ...

    async def global_quote(self, symbol: str) -> PriceQuote:
        ...


@dataclass
class EnrichmentBatch:
    profiles: dict[str, CompanyProfile] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(value for value in values if value))


async def resolve_company_profiles(isins: Iterable[str], provider: ProfileProvider) -> EnrichmentBatch:
    """Fetch profiles for every unique ISIN at once; failures are isolated and logged."""

    keys = _unique(isins)
    results = await asyncio.gather(*(provider.company_profile(isin) for isin in keys), return_exceptions=True)
    batch = EnrichmentBatch()
    for isin, result in zip(keys, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("Profile lookup failed for %s: %s", isin, result)
            batch.failures[isin] = str(result) or type(result).__name__
        else:
            batch.profiles[isin] = result
    return batch


async def resolve_display_names(isins: Iterable[str], provider: Optional[ProfileProvider]) -> dict[str, str]:
    """Map each ISIN to a company name, falling back to the ISIN itself."""

    keys = _unique(isins)
    if provider is None or not provider.is_configured:
        if keys:
            logger.info("Profile lookups not configured; using ISINs as display names")
        return {isin: isin for isin in keys}
    batch = await resolve_company_profiles(keys, provider)
    return {isin: (batch.profiles[isin].name if isin in batch.profiles else isin) for isin in keys}


async def lookup_prices(symbols: Iterable[str], provider: Optional[QuoteProvider]) -> dict[str, PriceQuote]:
    """Quote each symbol; a failed lookup yields the zero-price ``unavailable`` sentinel."""

    keys = _unique(symbols)
    if provider is None or not provider.is_configured:
        return {symbol: PriceQuote(symbol=symbol, status=PriceStatus.NOT_CONFIGURED) for symbol in keys}
    results = await asyncio.gather(*(provider.global_quote(symbol) for symbol in keys), return_exceptions=True)
    quotes: dict[str, PriceQuote] = {}
    for symbol, result in zip(keys, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("Price lookup failed for %s: %s", symbol, result)
            quotes[symbol] = PriceQuote(symbol=symbol, status=PriceStatus.UNAVAILABLE)
        else:
            quotes[symbol] = result
    return quotes


__all__ = [
    "EnrichmentBatch",
    "ProfileProvider",
    "QuoteProvider",
    "lookup_prices",
    "resolve_company_profiles",
    "resolve_display_names",
]
