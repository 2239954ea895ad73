"""Rupee formatting used in summaries and plan output."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

RUPEE = "₹"
LAKH = Decimal("100000")


def group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: ``1234567`` -> ``12,34,567``."""

    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(amount: Decimal | int | float, decimals: int = 0) -> str:
    value = Decimal(str(amount))
    quantum = Decimal(1).scaleb(-decimals) if decimals else Decimal(1)
    value = value.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    text = format(abs(value), "f")
    whole, _, fraction = text.partition(".")
    grouped = group_indian(whole)
    if fraction:
        grouped = f"{grouped}.{fraction}"
    return f"{sign}{RUPEE}{grouped}"


def format_lakhs_or_inr(amount: Decimal) -> str:
    """``₹11.2 Lakhs`` from one lakh upwards, Indian-grouped rupees below that."""

    if amount >= LAKH:
        lakhs = (amount / LAKH).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return f"{RUPEE}{lakhs} Lakhs"
    return format_inr(amount)


__all__ = ["LAKH", "RUPEE", "format_inr", "format_lakhs_or_inr", "group_indian"]
