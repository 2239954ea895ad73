"""Net worth snapshot records."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from .common import MoneyAmount, RecordModel


class NetWorthAttributeValue(RecordModel):
    attribute: str = Field(..., examples=["ASSET_TYPE_MUTUAL_FUND"])
    label: str = Field(..., examples=["Mutual Fund"])
    value: MoneyAmount


class SecurityHolding(RecordModel):
    """One equity, ETF, REIT or InvIT line inside an account."""

    isin: str
    name: Optional[str] = None
    units: Optional[Decimal] = None
    price: MoneyAmount = Field(default_factory=MoneyAmount)

    def market_value(self) -> Decimal | None:
        price = self.price.as_decimal()
        if price is None or self.units is None:
            return None
        return self.units * price


class DepositSummary(RecordModel):
    current_balance: MoneyAmount
    account_type: Optional[str] = None
    balance_date: Optional[date] = None


class AccountHoldings(RecordModel):
    account_id: str
    masked_account_number: Optional[str] = None
    instrument_type: Optional[str] = None
    fip_id: Optional[str] = None
    equities: list[SecurityHolding] = Field(default_factory=list)
    etfs: list[SecurityHolding] = Field(default_factory=list)
    reits: list[SecurityHolding] = Field(default_factory=list)
    invits: list[SecurityHolding] = Field(default_factory=list)
    deposit: Optional[DepositSummary] = None


class NetWorthSnapshot(RecordModel):
    total_net_worth: MoneyAmount
    asset_values: list[NetWorthAttributeValue] = Field(default_factory=list)
    liability_values: list[NetWorthAttributeValue] = Field(default_factory=list)
    accounts: dict[str, AccountHoldings] = Field(default_factory=dict)


class NetWorthSummary(RecordModel):
    """Naive totals derived from a snapshot; unknown values are left out of the sums."""

    total_net_worth: Optional[Decimal] = None
    total_assets: Decimal
    total_liabilities: Decimal
    asset_breakdown: dict[str, Decimal] = Field(default_factory=dict)
    liability_breakdown: dict[str, Decimal] = Field(default_factory=dict)
    account_count: int = 0
    summary: str


__all__ = [
    "AccountHoldings",
    "DepositSummary",
    "NetWorthAttributeValue",
    "NetWorthSnapshot",
    "NetWorthSummary",
    "SecurityHolding",
]
