"""Monthly income and spending derived from bank transactions."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import pandas as pd

from moneymap.config.settings import DEFAULT_TIMEZONE
from moneymap.schemas.bank import BankAccountTransactions, MonthlyCashflow, TransactionType

_CENT = Decimal("0.01")


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(round(float(value), 2))).quantize(_CENT)


def cashflow_frame(accounts: Iterable[BankAccountTransactions], timezone: str = DEFAULT_TIMEZONE) -> pd.DataFrame:
    """One row per transaction with a known amount: month, amount and direction."""

    rows = []
    for account in accounts:
        for txn in account.transactions:
            amount = txn.amount.as_decimal()
            if amount is None:
                continue
            rows.append(
                {
                    "timestamp": txn.timestamp,
                    "amount": float(amount),
                    "transaction_type": txn.transaction_type.value,
                }
            )
    if not rows:
        return pd.DataFrame(columns=["timestamp", "amount", "transaction_type", "month"])
    frame = pd.DataFrame(rows)
    stamps = pd.to_datetime(frame["timestamp"], utc=True).dt.tz_convert(timezone)
    frame["month"] = stamps.dt.strftime("%Y-%m")
    return frame


def summarize_monthly_cashflow(
    accounts: Iterable[BankAccountTransactions], timezone: str = DEFAULT_TIMEZONE
) -> list[MonthlyCashflow]:
    """Credits count as income and debits as spending; other types only add to the count."""

    frame = cashflow_frame(accounts, timezone)
    if frame.empty:
        return []
    frame["income"] = frame["amount"].where(frame["transaction_type"] == TransactionType.CREDIT.value, 0.0)
    frame["spending"] = frame["amount"].where(frame["transaction_type"] == TransactionType.DEBIT.value, 0.0).abs()
    monthly = (
        frame.groupby("month", sort=True)
        .agg(income=("income", "sum"), spending=("spending", "sum"), transaction_count=("amount", "size"))
        .reset_index()
    )
    return [
        MonthlyCashflow(
            month=row.month,
            income=_to_decimal(row.income),
            spending=_to_decimal(row.spending),
            savings=_to_decimal(row.income) - _to_decimal(row.spending),
            transaction_count=int(row.transaction_count),
        )
        for row in monthly.itertuples(index=False)
    ]


def describe_cashflow(months: Iterable[MonthlyCashflow]) -> str:
    """Plain-text rendering used as prompt context."""

    lines = [
        f"{item.month}: income {item.income}, spending {item.spending}, savings {item.savings}"
        for item in months
    ]
    return "\n".join(lines) if lines else "No bank transactions available."


__all__ = ["cashflow_frame", "describe_cashflow", "summarize_monthly_cashflow"]
