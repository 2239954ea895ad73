"""Credit report: bureau score plus accounts partitioned into open and closed."""

from __future__ import annotations

import logging
from typing import Any

from moneymap.core.errors import TransformError
from moneymap.ingest.client import MCPClient, MCPTool
from moneymap.schemas.credit import ACTIVE_STATUS, CreditReport
from moneymap.schemas.validation import validate_record

from .layouts import (
    CREDIT_ACCOUNT_STATUSES,
    CREDIT_ACCOUNT_STATUS_DEFAULT,
    CREDIT_ACCOUNT_TYPES,
    CREDIT_ACCOUNT_TYPE_DEFAULT,
    credit_code_key,
)
from .payload import money_from_payload, require_list, require_mapping

logger = logging.getLogger(__name__)

DOMAIN = "credit_report"

# Lower bounds of the dashboard gauge bands.
SCORE_BANDS: tuple[tuple[int, str], ...] = (
    (800, "Excellent"),
    (740, "Very Good"),
    (670, "Good"),
    (580, "Fair"),
)


def score_rating(score: int) -> str:
    for lower_bound, rating in SCORE_BANDS:
        if score >= lower_bound:
            return rating
    return "Poor"


def account_type_label(code: Any) -> str:
    return CREDIT_ACCOUNT_TYPES.get(credit_code_key(code), CREDIT_ACCOUNT_TYPE_DEFAULT)


def account_status_label(code: Any) -> str:
    return CREDIT_ACCOUNT_STATUSES.get(credit_code_key(code), CREDIT_ACCOUNT_STATUS_DEFAULT)


def _parse_score(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise TransformError(DOMAIN, f"bureau score {value!r} is not an integer") from exc


def _account(raw: Any) -> dict[str, Any]:
    entry = require_mapping(DOMAIN, raw, "creditAccountDetails entry")
    return {
        "account_type": account_type_label(entry.get("accountType")),
        "lender": str(entry.get("subscriberName") or ""),
        "total_balance": money_from_payload(entry.get("currentBalance")),
        "sanctioned_amount": money_from_payload(entry.get("highestCreditOrOriginalLoanAmount")),
        "account_status": account_status_label(entry.get("accountStatus")),
    }


def transform_credit_report(payload: Any) -> CreditReport:
    """Score history and factors are not supplied upstream and stay empty."""

    root = require_mapping(DOMAIN, payload, "payload")
    reports = require_list(DOMAIN, root.get("creditReports"), "creditReports")
    if not reports:
        raise TransformError(DOMAIN, "creditReports is empty")
    report = require_mapping(DOMAIN, reports[0], "creditReports[0]")
    report_data = require_mapping(DOMAIN, report.get("creditReportData"), "creditReportData")
    score_block = require_mapping(DOMAIN, report_data.get("score"), "score")
    score = _parse_score(score_block.get("bureauScore"))
    credit_account = require_mapping(DOMAIN, report_data.get("creditAccount") or {}, "creditAccount")
    details = require_list(
        DOMAIN, credit_account.get("creditAccountDetails") or [], "creditAccountDetails"
    )
    try:
        accounts = [_account(item) for item in details]
    except ValueError as exc:
        raise TransformError(DOMAIN, str(exc)) from exc
    data = {
        "scores": [
            {
                "bureau": str(report.get("vendor") or "Unknown"),
                "score": score,
                "rating": score_rating(score),
            }
        ],
        "open_accounts": [acc for acc in accounts if acc["account_status"] == ACTIVE_STATUS],
        "closed_accounts": [acc for acc in accounts if acc["account_status"] != ACTIVE_STATUS],
    }
    logger.debug("Credit report has %d open and %d closed accounts", len(data["open_accounts"]), len(data["closed_accounts"]))
    return validate_record(DOMAIN, CreditReport, data)


async def fetch_credit_report(client: MCPClient) -> CreditReport:
    payload = await client.fetch_payload(MCPTool.FETCH_CREDIT_REPORT)
    return transform_credit_report(payload)


__all__ = [
    "DOMAIN",
    "SCORE_BANDS",
    "account_status_label",
    "account_type_label",
    "fetch_credit_report",
    "score_rating",
    "transform_credit_report",
]
