"""Utility helpers for calculator modules."""

from __future__ import annotations

from decimal import Decimal

_HUNDRED = Decimal("100")


def format_percentage(value: Decimal | float) -> str:
    """Return a human-readable percentage label for the fraction ``value``."""

    percentage = Decimal(str(value)) * _HUNDRED
    if percentage == percentage.to_integral_value():
        return f"{int(percentage)}%"
    return f"{percentage.normalize():f}%"


def round_currency(value: Decimal | float) -> float:
    """Round monetary amounts to two decimals for JSON output."""

    return round(float(value), 2)


def round_rate(value: Decimal | float) -> float:
    """Round percentages and ratios to four decimals for JSON output."""

    return round(float(value), 4)
