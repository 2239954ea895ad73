"""Positional row layouts and code tables used by the aggregator payloads.

Transaction rows arrive as bare arrays; the tuples below name each position
once so the transformers never index rows by number.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from moneymap.schemas.bank import TransactionType
from moneymap.schemas.mutual_funds import MfTransactionType
from moneymap.schemas.stocks import StockTransactionType

BANK_TXN_LAYOUT = ("amount", "narration", "timestamp", "type_code", "mode", "balance")
STOCK_TXN_LAYOUT = ("type_code", "trade_date", "quantity", "price")
MF_TXN_LAYOUT = ("type_code", "date", "nav", "units", "amount")

BANK_TXN_TYPES: Mapping[int, TransactionType] = {
    1: TransactionType.CREDIT,
    2: TransactionType.DEBIT,
}

STOCK_TXN_TYPES: Mapping[int, StockTransactionType] = {
    1: StockTransactionType.BUY,
    2: StockTransactionType.SELL,
    3: StockTransactionType.BONUS,
    4: StockTransactionType.SPLIT,
}

MF_TXN_TYPES: Mapping[int, MfTransactionType] = {
    1: MfTransactionType.PURCHASE,
    2: MfTransactionType.SELL,
}

CREDIT_ACCOUNT_TYPES: Mapping[str, str] = {
    "01": "Auto Loan",
    "02": "Housing Loan",
    "03": "Property Loan",
    "04": "Loan Against Shares/Securities",
    "05": "Personal Loan",
    "06": "Consumer Loan",
    "10": "Credit Card",
    "11": "Leasing",
    "17": "Two-wheeler Loan",
    "31": "Business Loan - General",
    "51": "Overdraft",
    "53": "Loan on Credit Card",
}
CREDIT_ACCOUNT_TYPE_DEFAULT = "Other"

CREDIT_ACCOUNT_STATUSES: Mapping[str, str] = {
    "11": "Active",
    "71": "Settled",
    "78": "Restructured",
    "82": "Written-off",
    "83": "Suit Filed",
}
CREDIT_ACCOUNT_STATUS_DEFAULT = "Unknown"


def row_to_fields(layout: Sequence[str], row: Sequence[Any]) -> dict[str, Any]:
    """Name the positions of ``row``; missing trailing positions become ``None``."""

    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise ValueError(f"expected an array row, got {type(row).__name__}")
    return {name: (row[idx] if idx < len(row) else None) for idx, name in enumerate(layout)}


def parse_code(value: Any) -> Optional[int]:
    """Coerce a numeric type code (``1``, ``"1"``, ``1.0``) to int; ``None`` when unusable."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer():
        return None
    return int(number)


def credit_code_key(value: Any) -> str:
    """Normalise a credit account code to its two-digit form (``1`` -> ``"01"``)."""

    text = str(value).strip() if value is not None else ""
    if text.isdigit():
        return text.zfill(2)
    return text


__all__ = [
    "BANK_TXN_LAYOUT",
    "BANK_TXN_TYPES",
    "CREDIT_ACCOUNT_STATUSES",
    "CREDIT_ACCOUNT_STATUS_DEFAULT",
    "CREDIT_ACCOUNT_TYPES",
    "CREDIT_ACCOUNT_TYPE_DEFAULT",
    "MF_TXN_LAYOUT",
    "MF_TXN_TYPES",
    "STOCK_TXN_LAYOUT",
    "STOCK_TXN_TYPES",
    "credit_code_key",
    "parse_code",
    "row_to_fields",
]
