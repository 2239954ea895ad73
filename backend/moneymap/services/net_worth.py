"""Net worth snapshot: transform the aggregator payload and derive naive totals."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from moneymap.core.errors import TransformError
from moneymap.ingest.client import MCPClient, MCPTool
from moneymap.schemas.common import MoneyAmount
from moneymap.schemas.net_worth import (
    NetWorthAttributeValue,
    NetWorthSnapshot,
    NetWorthSummary,
)
from moneymap.schemas.validation import validate_record

from .formatting import format_inr
from .payload import money_from_payload, parse_date, require_list, require_mapping

logger = logging.getLogger(__name__)

DOMAIN = "net_worth"

_ATTRIBUTE_PREFIXES = ("ASSET_TYPE_", "LIABILITY_TYPE_")


def attribute_label(attribute: str) -> str:
    """``ASSET_TYPE_MUTUAL_FUND`` -> ``Mutual Fund``."""

    name = attribute
    for prefix in _ATTRIBUTE_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
            break
    return " ".join(word.capitalize() for word in name.split("_") if word)


def _attribute_values(raw: Any, what: str) -> list[NetWorthAttributeValue]:
    values = []
    for item in require_list(DOMAIN, raw if raw is not None else [], what):
        entry = require_mapping(DOMAIN, item, f"{what} entry")
        attribute = str(entry.get("netWorthAttribute") or "UNKNOWN")
        values.append(
            NetWorthAttributeValue(
                attribute=attribute,
                label=attribute_label(attribute),
                value=money_from_payload(entry.get("value")),
            )
        )
    return values


def _holdings(summary: Any, *, name_keys: tuple[str, ...], units_key: str, price_key: str) -> list[dict[str, Any]]:
    if not isinstance(summary, dict):
        return []
    rows = []
    for info in summary.get("holdingsInfo") or []:
        if not isinstance(info, dict) or not info.get("isin"):
            continue
        name = next((info[key] for key in name_keys if info.get(key)), None)
        rows.append(
            {
                "isin": str(info["isin"]),
                "name": name,
                "units": info.get(units_key),
                "price": money_from_payload(info.get(price_key)),
            }
        )
    return rows


def _account(account_id: str, raw: Any) -> dict[str, Any]:
    entry = require_mapping(DOMAIN, raw, f"account {account_id}")
    details = require_mapping(DOMAIN, entry.get("accountDetails") or {}, f"account {account_id} accountDetails")
    deposit = entry.get("depositSummary")
    account: dict[str, Any] = {
        "account_id": account_id,
        "masked_account_number": details.get("maskedAccountNumber"),
        "instrument_type": details.get("accInstrumentType"),
        "fip_id": details.get("fipId"),
        "equities": _holdings(
            entry.get("equitySummary"),
            name_keys=("issuerName", "isinDescription"),
            units_key="units",
            price_key="lastTradedPrice",
        ),
        "etfs": _holdings(entry.get("etfSummary"), name_keys=("isinDescription",), units_key="units", price_key="nav"),
        "reits": _holdings(
            entry.get("reitSummary"),
            name_keys=("isinDescription",),
            units_key="totalNumberUnits",
            price_key="lastClosingRate",
        ),
        "invits": _holdings(
            entry.get("invitSummary"),
            name_keys=("isinDescription",),
            units_key="totalNumberUnits",
            price_key="lastClosingRate",
        ),
    }
    if isinstance(deposit, dict):
        account["deposit"] = {
            "current_balance": money_from_payload(deposit.get("currentBalance")),
            "account_type": deposit.get("depositAccountType"),
            "balance_date": parse_date(deposit.get("balanceDate")),
        }
    return account


def transform_net_worth(payload: Any) -> NetWorthSnapshot:
    """Turn the ``fetch_net_worth`` payload into a validated snapshot."""

    root = require_mapping(DOMAIN, payload, "payload")
    response = require_mapping(DOMAIN, root.get("netWorthResponse"), "netWorthResponse")
    try:
        data: dict[str, Any] = {
            "total_net_worth": money_from_payload(response.get("totalNetWorthValue")),
            "asset_values": _attribute_values(response.get("assetValues"), "assetValues"),
            "liability_values": _attribute_values(response.get("liabilityValues"), "liabilityValues"),
            "accounts": {},
        }
        bulk = root.get("accountDetailsBulkResponse")
        if bulk is not None:
            bulk = require_mapping(DOMAIN, bulk, "accountDetailsBulkResponse")
            details_map = require_mapping(DOMAIN, bulk.get("accountDetailsMap") or {}, "accountDetailsMap")
            data["accounts"] = {str(key): _account(str(key), raw) for key, raw in details_map.items()}
    except ValueError as exc:
        raise TransformError(DOMAIN, str(exc)) from exc
    logger.debug("Net worth payload covers %d linked accounts", len(data["accounts"]))
    return validate_record(DOMAIN, NetWorthSnapshot, data)


async def fetch_net_worth(client: MCPClient) -> NetWorthSnapshot:
    payload = await client.fetch_payload(MCPTool.FETCH_NET_WORTH)
    return transform_net_worth(payload)


def _known(amount: MoneyAmount) -> Decimal | None:
    return amount.as_decimal() if amount.is_known else None


def _breakdown(values: list[NetWorthAttributeValue]) -> dict[str, Decimal]:
    breakdown: dict[str, Decimal] = {}
    for item in values:
        value = _known(item.value)
        if value is None:
            continue
        breakdown[item.label] = breakdown.get(item.label, Decimal("0")) + value
    return breakdown


def _describe(breakdown: dict[str, Decimal]) -> str:
    if not breakdown:
        return "none reported"
    return ", ".join(f"{label} {format_inr(value)}" for label, value in breakdown.items())


def summarize_net_worth(snapshot: NetWorthSnapshot) -> NetWorthSummary:
    """Sum the known asset and liability values; unknown amounts are skipped, not zeroed."""

    assets = _breakdown(snapshot.asset_values)
    liabilities = _breakdown(snapshot.liability_values)
    total_assets = sum(assets.values(), Decimal("0"))
    total_liabilities = sum(liabilities.values(), Decimal("0"))
    total = _known(snapshot.total_net_worth)
    headline = format_inr(total) if total is not None else "unknown"
    summary = (
        f"Total net worth {headline}. "
        f"Assets: {_describe(assets)}. "
        f"Liabilities: {_describe(liabilities)}."
    )
    return NetWorthSummary(
        total_net_worth=total,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        asset_breakdown=assets,
        liability_breakdown=liabilities,
        account_count=len(snapshot.accounts),
        summary=summary,
    )


__all__ = [
    "DOMAIN",
    "attribute_label",
    "fetch_net_worth",
    "summarize_net_worth",
    "transform_net_worth",
]
