"""Stock transaction and holding records."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import Field

from .common import AllocationSlice, MoneyAmount, RecordModel
from .market import PriceStatus


class StockTransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    BONUS = "BONUS"
    SPLIT = "SPLIT"
    UNKNOWN = "UNKNOWN"


class StockTransaction(RecordModel):
    trade_date: date
    stock_name: str
    isin: str
    type: StockTransactionType
    quantity: Decimal
    price: MoneyAmount
    amount: MoneyAmount


class StockTransactionsResponse(RecordModel):
    transactions: list[StockTransaction] = Field(default_factory=list)


class Holding(RecordModel):
    isin: str
    stock_name: str
    net_quantity: Decimal
    invested_amount: Decimal


class ValuedHolding(Holding):
    current_value: Decimal
    valuation_basis: str = Field(..., pattern="^(market|invested)$")
    price_status: PriceStatus


class StockHoldingsView(RecordModel):
    holdings: list[ValuedHolding]
    top_holdings: list[ValuedHolding]
    sector_allocation: list[AllocationSlice]


__all__ = [
    "Holding",
    "StockHoldingsView",
    "StockTransaction",
    "StockTransactionType",
    "StockTransactionsResponse",
    "ValuedHolding",
]
