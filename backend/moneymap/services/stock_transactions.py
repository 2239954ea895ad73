"""Stock transactions: positional rows per ISIN, names resolved through the profile lookup."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

from moneymap.core.errors import TransformError
from moneymap.ingest.client import MCPClient, MCPTool
from moneymap.schemas.common import MoneyAmount, format_decimal, parse_decimal
from moneymap.schemas.stocks import StockTransactionsResponse, StockTransactionType
from moneymap.schemas.validation import validate_record

from .enrichment import ProfileProvider, resolve_display_names
from .layouts import STOCK_TXN_LAYOUT, STOCK_TXN_TYPES, parse_code, row_to_fields
from .payload import parse_date, require_list, require_mapping

logger = logging.getLogger(__name__)

DOMAIN = "stock_transactions"


def stock_transaction_type(code: Any) -> StockTransactionType:
    txn_type = STOCK_TXN_TYPES.get(parse_code(code))
    if txn_type is None:
        logger.warning("Unmapped stock transaction type code %r; recording as UNKNOWN", code)
        return StockTransactionType.UNKNOWN
    return txn_type


def _transaction(isin: str, stock_name: str, row: Any) -> dict[str, Any]:
    fields = row_to_fields(STOCK_TXN_LAYOUT, row)
    trade_date = parse_date(fields["trade_date"])
    if trade_date is None:
        raise ValueError(f"transaction for {isin} has no trade date")
    quantity = parse_decimal(fields["quantity"]) or Decimal("0")
    price = parse_decimal(fields["price"])
    amount = MoneyAmount(units=format_decimal(quantity * price)) if price is not None else MoneyAmount()
    return {
        "trade_date": trade_date,
        "stock_name": stock_name,
        "isin": isin,
        "type": stock_transaction_type(fields["type_code"]),
        "quantity": quantity,
        "price": MoneyAmount.of(price) if price is not None else MoneyAmount(),
        "amount": amount,
    }


def stock_isins(payload: Any) -> list[str]:
    """Unique ISINs in payload order."""

    root = require_mapping(DOMAIN, payload, "payload")
    seen: dict[str, None] = {}
    for entry in require_list(DOMAIN, root.get("stockTransactions"), "stockTransactions"):
        if isinstance(entry, dict) and entry.get("isin"):
            seen.setdefault(str(entry["isin"]), None)
    return list(seen)


def transform_stock_transactions(
    payload: Any, display_names: Optional[Mapping[str, str]] = None
) -> StockTransactionsResponse:
    """Flatten per-ISIN rows, newest first; unknown names fall back to the ISIN."""

    root = require_mapping(DOMAIN, payload, "payload")
    entries = require_list(DOMAIN, root.get("stockTransactions"), "stockTransactions")
    names = display_names or {}
    try:
        transactions = []
        for index, raw in enumerate(entries):
            entry = require_mapping(DOMAIN, raw, f"stockTransactions[{index}]")
            isin = entry.get("isin")
            if not isin:
                raise ValueError(f"stockTransactions[{index}] has no isin")
            isin = str(isin)
            rows = require_list(DOMAIN, entry.get("txns") or [], f"{isin} txns")
            transactions.extend(_transaction(isin, names.get(isin) or isin, row) for row in rows)
    except ValueError as exc:
        raise TransformError(DOMAIN, str(exc)) from exc
    transactions.sort(key=lambda txn: txn["trade_date"], reverse=True)
    return validate_record(DOMAIN, StockTransactionsResponse, {"transactions": transactions})


async def fetch_stock_transactions(
    client: MCPClient, profiles: Optional[ProfileProvider] = None
) -> StockTransactionsResponse:
    payload = await client.fetch_payload(MCPTool.FETCH_STOCK_TRANSACTIONS)
    names = await resolve_display_names(stock_isins(payload), profiles)
    return transform_stock_transactions(payload, names)


__all__ = [
    "DOMAIN",
    "fetch_stock_transactions",
    "stock_isins",
    "stock_transaction_type",
    "transform_stock_transactions",
]
