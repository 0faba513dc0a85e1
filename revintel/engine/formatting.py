"""Display formatting for report figures."""

from __future__ import annotations

import math
from typing import Optional

NOT_REACHED = "not reached at current projections"


def format_currency(amount: float) -> str:
    """Whole dollars with thousands separators, e.g. -$1,250."""
    if not math.isfinite(amount):
        return "n/a"
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.0f}"


def format_percent(fraction: float, decimals: int = 1) -> str:
    """A fraction as a percentage: 0.125 -> '12.5%'."""
    if not math.isfinite(fraction):
        return "n/a"
    return f"{fraction * 100:.{decimals}f}%"


def format_number(value: float, decimals: int = 1) -> str:
    """Up to ``decimals`` places without trailing zeros: 8.0 -> '8'."""
    if not math.isfinite(value):
        return "n/a"
    text = f"{value:,.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_months(months: Optional[float]) -> str:
    if months is None:
        return NOT_REACHED
    unit = "month" if months == 1 else "months"
    return f"{format_number(months)} {unit}"


def format_days(months: Optional[float]) -> str:
    if months is None:
        return NOT_REACHED
    return f"{months * 30:,.0f} days"
