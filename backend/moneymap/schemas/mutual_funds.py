"""Mutual fund transaction and holding records."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import AllocationSlice, MoneyAmount, RecordModel


class MfTransactionType(str, Enum):
    PURCHASE = "PURCHASE"
    SELL = "SELL"


class MfTransaction(RecordModel):
    date: dt.date
    scheme_name: str
    folio_number: str
    isin: Optional[str] = None
    type: MfTransactionType
    amount: MoneyAmount
    units: str
    nav: MoneyAmount


class MfTransactionsResponse(RecordModel):
    transactions: list[MfTransaction] = Field(default_factory=list)


class FundHolding(RecordModel):
    scheme_name: str
    folio_number: str
    invested_amount: Decimal
    category: str


class FundHoldingsView(RecordModel):
    holdings: list[FundHolding]
    top_holdings: list[FundHolding]
    allocation: list[AllocationSlice]


__all__ = [
    "FundHolding",
    "FundHoldingsView",
    "MfTransaction",
    "MfTransactionType",
    "MfTransactionsResponse",
]
