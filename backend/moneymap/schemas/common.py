"""Shared building blocks for the domain records."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_NANOS_PER_UNIT = Decimal("1000000000")


class RecordModel(BaseModel):
    """Immutable record: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DataAvailability(str, Enum):
    """Marks fields the upstream aggregator does not provide yet."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


def parse_decimal(value: Any) -> Decimal | None:
    """Return ``value`` as a finite Decimal, ``None`` for blanks; raise ValueError otherwise."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{value!r} is not a decimal number") from exc
    if not number.is_finite():
        raise ValueError(f"{value!r} is not a finite number")
    return number


def format_decimal(value: Decimal) -> str:
    """Render a Decimal without exponent notation or trailing zeros."""

    try:
        integral = value.to_integral_value()
        if value == integral:
            return format(integral, "f")
        return format(value.normalize(), "f")
    except InvalidOperation as exc:
        raise ValueError(f"{value!r} cannot be rendered as a plain number") from exc


class MoneyAmount(RecordModel):
    """A currency amount whose absence means "unknown", never zero."""

    currency_code: Optional[str] = None
    units: Optional[str] = None
    nanos: Optional[int] = None

    @field_validator("units")
    @classmethod
    def _units_must_be_finite(cls, value: str | None) -> str | None:
        if value is None:
            return None
        parse_decimal(value)
        return value

    @classmethod
    def of(cls, value: Any, currency_code: str | None = None) -> "MoneyAmount":
        """Build an amount from a number or numeric string; blanks give an unknown amount."""

        number = parse_decimal(value)
        units = format_decimal(number) if number is not None else None
        return cls(currency_code=currency_code, units=units)

    @property
    def is_known(self) -> bool:
        return self.units is not None and parse_decimal(self.units) is not None

    def as_decimal(self) -> Decimal | None:
        number = parse_decimal(self.units)
        if number is None:
            return None
        if self.nanos:
            number += Decimal(self.nanos) / _NANOS_PER_UNIT
        return number


class AllocationSlice(RecordModel):
    category: str
    amount: Decimal
    percentage: float


class ActionResult(BaseModel, Generic[T]):
    """Explicit success/failure outcome returned across the API boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "ActionResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, kind: str = "unknown") -> "ActionResult[T]":
        return cls(success=False, error=message, error_kind=kind)


__all__ = [
    "ActionResult",
    "AllocationSlice",
    "DataAvailability",
    "MoneyAmount",
    "RecordModel",
    "format_decimal",
    "parse_decimal",
]
