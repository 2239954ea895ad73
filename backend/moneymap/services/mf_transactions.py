"""Mutual fund transactions: positional rows per scheme and folio."""

from __future__ import annotations

import logging
from typing import Any

from moneymap.core.errors import TransformError
from moneymap.ingest.client import MCPClient, MCPTool
from moneymap.schemas.common import format_decimal, parse_decimal
from moneymap.schemas.mutual_funds import MfTransactionsResponse, MfTransactionType
from moneymap.schemas.validation import validate_record

from .layouts import MF_TXN_LAYOUT, MF_TXN_TYPES, parse_code, row_to_fields
from .payload import money_from_payload, parse_date, require_mapping

logger = logging.getLogger(__name__)

DOMAIN = "mf_transactions"


def mf_transaction_type(code: Any) -> MfTransactionType:
    txn_type = MF_TXN_TYPES.get(parse_code(code))
    if txn_type is None:
        logger.warning("Unmapped mutual fund transaction type code %r; recording as SELL", code)
        return MfTransactionType.SELL
    return txn_type


def _transaction(fund: dict[str, Any], row: Any) -> dict[str, Any]:
    fields = row_to_fields(MF_TXN_LAYOUT, row)
    txn_date = parse_date(fields["date"])
    if txn_date is None:
        raise ValueError(f"transaction for {fund.get('schemeName')!r} has no date")
    units = parse_decimal(fields["units"])
    if units is None:
        raise ValueError(f"transaction for {fund.get('schemeName')!r} has no units")
    return {
        "date": txn_date,
        "scheme_name": str(fund.get("schemeName") or ""),
        "folio_number": str(fund.get("folioId") or ""),
        "isin": fund.get("isin"),
        "type": mf_transaction_type(fields["type_code"]),
        "amount": money_from_payload(fields["amount"]),
        "units": format_decimal(units),
        "nav": money_from_payload(fields["nav"]),
    }


def transform_mf_transactions(payload: Any) -> MfTransactionsResponse:
    root = require_mapping(DOMAIN, payload, "payload")
    funds = root.get("mfTransactions")
    if not isinstance(funds, list):
        raise TransformError(DOMAIN, "mfTransactions is not an array")
    try:
        transactions = []
        for index, raw in enumerate(funds):
            fund = require_mapping(DOMAIN, raw, f"mfTransactions[{index}]")
            transactions.extend(_transaction(fund, row) for row in fund.get("txns") or [])
    except ValueError as exc:
        raise TransformError(DOMAIN, str(exc)) from exc
    transactions.sort(key=lambda txn: txn["date"], reverse=True)
    return validate_record(DOMAIN, MfTransactionsResponse, {"transactions": transactions})


async def fetch_mf_transactions(client: MCPClient) -> MfTransactionsResponse:
    payload = await client.fetch_payload(MCPTool.FETCH_MF_TRANSACTIONS)
    return transform_mf_transactions(payload)


__all__ = ["DOMAIN", "fetch_mf_transactions", "mf_transaction_type", "transform_mf_transactions"]
