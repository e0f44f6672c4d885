"""Display strings for the table view. Never used by the CSV export."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .models import DisplayRow, Row

MISSING = "-"
NBSP = "\u00a0"


def format_percent(value: Optional[float]) -> str:
    """0.42 -> "42%", None -> "-"."""
    if value is None:
        return MISSING
    scaled = Decimal(repr(value * 100)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return f"{scaled}%"


def format_eur(value: float) -> str:
    """German-locale whole-euro amount: -1234.5 -> "-1.235 €" (non-breaking space)."""
    amount = Decimal(repr(value)).copy_abs().quantize(Decimal(1), rounding=ROUND_HALF_UP)
    grouped = f"{int(amount):,}".replace(",", ".")
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    return f"{sign}{grouped}{NBSP}€"


def to_display_row(row: Row) -> DisplayRow:
    return DisplayRow(
        person=row.person,
        past_12_months=format_percent(row.past_12_months),
        y2d=format_percent(row.y2d),
        may=format_percent(row.may),
        june=format_percent(row.june),
        july=format_percent(row.july),
        net_earnings_prev_month=format_eur(row.net_earnings_prev_month),
        net_earnings_positive=row.net_earnings_prev_month >= 0,
    )
