"""EPF details: establishment balances from the first UAN account."""

from __future__ import annotations

import logging
from typing import Any

from moneymap.core.errors import TransformError
from moneymap.ingest.client import MCPClient, MCPTool
from moneymap.schemas.common import DataAvailability
from moneymap.schemas.epf import EpfProfile
from moneymap.schemas.validation import validate_record

from .payload import money_from_payload, parse_date, parse_timestamp, require_list, require_mapping

logger = logging.getLogger(__name__)

DOMAIN = "epf"


def _optional_text(value: Any) -> str | None:
    return str(value) if value not in (None, "") else None


def _share(pf_balance: dict[str, Any], key: str) -> Any:
    share = pf_balance.get(key)
    if not isinstance(share, dict):
        return None
    return share.get("balance") or share.get("credit")


def _contribution(raw: Any) -> dict[str, Any]:
    entry = require_mapping(DOMAIN, raw, "contribution")
    return {
        "month": str(entry.get("month") or ""),
        "employee_contribution": money_from_payload(entry.get("employeeContribution", entry.get("employee_share"))),
        "employer_contribution": money_from_payload(entry.get("employerContribution", entry.get("employer_share"))),
        "transaction_date": parse_timestamp(entry.get("transactionDate", entry.get("trrn_date"))),
    }


def _account(raw: Any) -> tuple[dict[str, Any], bool]:
    est = require_mapping(DOMAIN, raw, "est_details entry")
    pf_balance = require_mapping(DOMAIN, est.get("pf_balance") or {}, "pf_balance")
    contributions = est.get("contributions")
    has_contributions = isinstance(contributions, list)
    account = {
        "member_id": str(est.get("member_id") or ""),
        "establishment_name": str(est.get("est_name") or ""),
        "total_balance": money_from_payload(pf_balance.get("net_balance")),
        "employee_share": money_from_payload(_share(pf_balance, "employee_share")),
        "employer_share": money_from_payload(_share(pf_balance, "employer_share")),
        "contributions": [_contribution(item) for item in contributions] if has_contributions else [],
    }
    return account, has_contributions


def transform_epf_details(payload: Any) -> EpfProfile:
    """Read identity and balances from ``uanAccounts[0]``; nothing is invented."""

    root = require_mapping(DOMAIN, payload, "payload")
    uan_accounts = require_list(DOMAIN, root.get("uanAccounts"), "uanAccounts")
    if not uan_accounts:
        raise TransformError(DOMAIN, "uanAccounts is empty")
    uan_account = require_mapping(DOMAIN, uan_accounts[0], "uanAccounts[0]")
    raw_details = require_mapping(DOMAIN, uan_account.get("rawDetails"), "rawDetails")
    establishments = require_list(DOMAIN, raw_details.get("est_details"), "est_details")
    try:
        parsed = [_account(item) for item in establishments]
        data = {
            "uan": _optional_text(uan_account.get("uan")),
            "name": _optional_text(uan_account.get("name")),
            "date_of_birth": parse_date(uan_account.get("dateOfBirth")),
            "accounts": [account for account, _ in parsed],
            "contributions_status": (
                DataAvailability.AVAILABLE
                if parsed and all(has for _, has in parsed)
                else DataAvailability.UNAVAILABLE
            ),
        }
    except ValueError as exc:
        raise TransformError(DOMAIN, str(exc)) from exc
    if data["contributions_status"] is DataAvailability.UNAVAILABLE:
        logger.debug("EPF payload carries no contribution history")
    return validate_record(DOMAIN, EpfProfile, data)


async def fetch_epf_details(client: MCPClient) -> EpfProfile:
    payload = await client.fetch_payload(MCPTool.FETCH_EPF_DETAILS)
    return transform_epf_details(payload)


__all__ = ["DOMAIN", "fetch_epf_details", "transform_epf_details"]
