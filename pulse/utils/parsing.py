"""
Text-cell parsing helpers.

Cells are always stored as text; these helpers decide whether a cell *reads*
as a number or a date.  Unparsable input returns ``None`` and never raises.
"""

from __future__ import annotations

import math
from datetime import datetime

__all__ = ["parse_number", "parse_date", "format_number", "percentage"]


def parse_number(text: str | None) -> float | None:
    """Parse *text* as a finite float, tolerating surrounding whitespace.

    >>> parse_number(" 12.5 ")
    12.5
    >>> parse_number("1e3")
    1000.0
    >>> parse_number("abc") is None
    True

    ``NaN`` / ``Inf`` and Python-only spellings such as ``1_000`` are
    rejected.
    """
    if text is None:
        return None
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return None
    try:
        value = float(stripped)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_date(text: str | None, fmt: str) -> datetime | None:
    """Parse *text* with a single ``strptime`` format, or return ``None``."""
    if text is None:
        return None
    try:
        return datetime.strptime(text.strip(), fmt)
    except ValueError:
        return None


def format_number(value: float) -> str:
    """Render a configured number the way it appears in a text cell.

    Integral values lose the decimal point so ``999.0`` matches ``"999"``.

    >>> format_number(999.0)
    '999'
    >>> format_number(-1)
    '-1'
    >>> format_number(99.5)
    '99.5'
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def percentage(count: int, total: int, decimal_places: int) -> float:
    """``count / total * 100`` rounded, or ``0.0`` when *total* is zero."""
    if total == 0:
        return 0.0
    return round(count / total * 100, decimal_places)
