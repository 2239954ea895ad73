"""Employee Provident Fund records."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from .common import DataAvailability, MoneyAmount, RecordModel


class EpfContribution(RecordModel):
    month: str = Field(..., examples=["Jan 2024"])
    employee_contribution: MoneyAmount
    employer_contribution: MoneyAmount
    transaction_date: Optional[datetime] = None


class EpfAccount(RecordModel):
    member_id: str
    establishment_name: str
    total_balance: MoneyAmount
    employee_share: MoneyAmount
    employer_share: MoneyAmount
    contributions: list[EpfContribution] = Field(default_factory=list)


class EpfProfile(RecordModel):
    uan: Optional[str] = None
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    accounts: list[EpfAccount] = Field(default_factory=list)
    contributions_status: DataAvailability = DataAvailability.UNAVAILABLE


__all__ = ["EpfAccount", "EpfContribution", "EpfProfile"]
