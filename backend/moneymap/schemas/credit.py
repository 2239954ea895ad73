"""Credit report records."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from .common import DataAvailability, MoneyAmount, RecordModel

ACTIVE_STATUS = "Active"


class CreditScore(RecordModel):
    bureau: str
    score: int = Field(..., ge=0, le=999)
    rank: Optional[int] = None
    total_ranks: Optional[int] = None
    rating: str
    factors: list[str] = Field(default_factory=list)
    factors_status: DataAvailability = DataAvailability.UNAVAILABLE


class ScoreHistoryPoint(RecordModel):
    month: datetime
    score: int


class CreditAccount(RecordModel):
    account_type: str
    lender: str
    total_balance: MoneyAmount
    sanctioned_amount: MoneyAmount
    account_status: str


class CreditReport(RecordModel):
    scores: list[CreditScore] = Field(..., min_length=1)
    score_history: list[ScoreHistoryPoint] = Field(default_factory=list)
    score_history_status: DataAvailability = DataAvailability.UNAVAILABLE
    open_accounts: list[CreditAccount] = Field(default_factory=list)
    closed_accounts: list[CreditAccount] = Field(default_factory=list)

    @model_validator(mode="after")
    def _accounts_partitioned_by_status(self) -> "CreditReport":
        if any(acc.account_status != ACTIVE_STATUS for acc in self.open_accounts):
            raise ValueError("open accounts must all be Active")
        if any(acc.account_status == ACTIVE_STATUS for acc in self.closed_accounts):
            raise ValueError("closed accounts must not be Active")
        return self


__all__ = [
    "ACTIVE_STATUS",
    "CreditAccount",
    "CreditReport",
    "CreditScore",
    "ScoreHistoryPoint",
]
