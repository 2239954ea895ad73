"""Helpers shared by the domain transformers for reading loosely-typed payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

import pandas as pd

from moneymap.core.errors import TransformError
from moneymap.schemas.common import MoneyAmount, format_decimal, parse_decimal


def require_mapping(domain: str, value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TransformError(domain, f"{what} must be an object, got {type(value).__name__}")
    return value


def require_list(domain: str, value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise TransformError(domain, f"{what} must be a list, got {type(value).__name__}")
    return value


def money_from_payload(value: Any, currency_code: str | None = None) -> MoneyAmount:
    """Accept either a ``{currencyCode, units, nanos}`` object or a bare number."""

    if isinstance(value, dict):
        number = parse_decimal(value.get("units"))
        nanos = value.get("nanos")
        return MoneyAmount(
            currency_code=value.get("currencyCode") or currency_code,
            units=format_decimal(number) if number is not None else None,
            nanos=int(nanos) if isinstance(nanos, (int, float)) and not isinstance(nanos, bool) else None,
        )
    return MoneyAmount.of(value, currency_code=currency_code)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-ish timestamp with pandas; ``None`` for blanks, ValueError for garbage."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return value
    try:
        stamp = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"unparseable timestamp {value!r}") from exc
    if pd.isna(stamp):
        return None
    return stamp.to_pydatetime()


def parse_date(value: Any) -> Optional[date]:
    stamp = parse_timestamp(value)
    return stamp.date() if stamp is not None else None


__all__ = [
    "money_from_payload",
    "parse_date",
    "parse_timestamp",
    "require_list",
    "require_mapping",
]
