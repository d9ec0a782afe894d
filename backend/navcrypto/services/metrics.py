"""Percentage and growth arithmetic shared by the dashboards.

Rounding is half-up (2.5 -> 3), which is what the dashboards display;
Python's built-in round() would give banker's rounding.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float]


def round_half_up(value: Number, digits: int = 0) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: Number, whole: Number) -> int:
    """Whole-number percentage of part in whole; 0 when whole is 0."""
    if not whole:
        return 0
    return int(round_half_up(part / whole * 100))


def growth(current: Number, previous: Number) -> float:
    """Relative change in percent.

    A previous value of 0 yields 100 when anything was recorded now, else 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def format_fixed(value: Number, digits: int) -> str:
    return f"{round_half_up(value, digits):.{digits}f}"
