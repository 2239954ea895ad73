"""Bank transactions: positional rows grouped per account."""

from __future__ import annotations

import logging
from typing import Any

from moneymap.core.errors import TransformError
from moneymap.ingest.client import MCPClient, MCPTool
from moneymap.schemas.bank import BankTransactionsResponse, TransactionType
from moneymap.schemas.validation import validate_record

from .layouts import BANK_TXN_LAYOUT, BANK_TXN_TYPES, parse_code, row_to_fields
from .payload import money_from_payload, parse_timestamp, require_list, require_mapping

logger = logging.getLogger(__name__)

DOMAIN = "bank_transactions"


def _transaction(bank: str, account_index: int, txn_index: int, row: Any) -> dict[str, Any]:
    fields = row_to_fields(BANK_TXN_LAYOUT, row)
    timestamp = parse_timestamp(fields["timestamp"])
    if timestamp is None:
        raise ValueError(f"transaction {txn_index} of {bank!r} has no timestamp")
    balance = fields["balance"]
    return {
        "transaction_id": f"{bank}-{account_index}-{txn_index}",
        "amount": money_from_payload(fields["amount"]),
        "narration": str(fields["narration"] or ""),
        "timestamp": timestamp,
        "transaction_type": BANK_TXN_TYPES.get(parse_code(fields["type_code"]), TransactionType.OTHER),
        "mode": str(fields["mode"]) if fields["mode"] is not None else None,
        "running_balance": money_from_payload(balance) if balance is not None else None,
    }


def transform_bank_transactions(payload: Any) -> BankTransactionsResponse:
    """Name the positional rows and synthesise ``{bank}-{account}-{txn}`` ids."""

    root = require_mapping(DOMAIN, payload, "payload")
    accounts = require_list(DOMAIN, root.get("bankTransactions"), "bankTransactions")
    try:
        data = []
        for account_index, raw_account in enumerate(accounts):
            account = require_mapping(DOMAIN, raw_account, f"bankTransactions[{account_index}]")
            bank = str(account.get("bank") or f"account-{account_index}")
            rows = require_list(DOMAIN, account.get("txns") or [], f"{bank} txns")
            data.append(
                {
                    "masked_account_number": bank,
                    "transactions": [
                        _transaction(bank, account_index, txn_index, row) for txn_index, row in enumerate(rows)
                    ],
                }
            )
    except ValueError as exc:
        raise TransformError(DOMAIN, str(exc)) from exc
    response = validate_record(DOMAIN, BankTransactionsResponse, {"account_transactions": data})
    logger.debug("Transformed %d bank accounts", len(response.account_transactions))
    return response


async def fetch_bank_transactions(client: MCPClient) -> BankTransactionsResponse:
    payload = await client.fetch_payload(MCPTool.FETCH_BANK_TRANSACTIONS)
    return transform_bank_transactions(payload)


__all__ = ["DOMAIN", "fetch_bank_transactions", "transform_bank_transactions"]
