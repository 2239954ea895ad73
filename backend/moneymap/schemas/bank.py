"""Bank transaction records."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from .common import MoneyAmount, RecordModel


class TransactionType(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    OTHER = "OTHER"


class Transaction(RecordModel):
    transaction_id: str
    amount: MoneyAmount
    narration: str = ""
    timestamp: datetime
    transaction_type: TransactionType
    mode: Optional[str] = None
    running_balance: Optional[MoneyAmount] = None


class BankAccountTransactions(RecordModel):
    masked_account_number: str
    transactions: list[Transaction] = Field(default_factory=list)


class BankTransactionsResponse(RecordModel):
    account_transactions: list[BankAccountTransactions] = Field(default_factory=list)

    @model_validator(mode="after")
    def _transaction_ids_unique(self) -> "BankTransactionsResponse":
        seen: set[str] = set()
        for account in self.account_transactions:
            for txn in account.transactions:
                if txn.transaction_id in seen:
                    raise ValueError(f"duplicate transaction id {txn.transaction_id!r}")
                seen.add(txn.transaction_id)
        return self


class MonthlyCashflow(RecordModel):
    month: str = Field(..., examples=["2024-06"])
    income: Decimal
    spending: Decimal
    savings: Decimal
    transaction_count: int


__all__ = [
    "BankAccountTransactions",
    "BankTransactionsResponse",
    "MonthlyCashflow",
    "Transaction",
    "TransactionType",
]
