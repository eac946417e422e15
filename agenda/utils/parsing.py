"""Lenient parsers for the date, time and money values stored by the agenda.

Stored rows are not validated at write time, so every reader goes through
these helpers and gets ``None`` (or zero) instead of an exception.
"""

import math
from datetime import date, datetime
from typing import Any


def parse_iso_date(value: Any) -> date | None:
    """Parse a stored ``YYYY-MM-DD`` value.

    Args:
        value: ISO date string, ``date`` or ``datetime``.

    Returns:
        The calendar date, or None when the value cannot be read.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_clock_minutes(value: Any) -> int | None:
    """Convert an ``HH:MM[:SS]`` time of day into minutes after midnight.

    Seconds are ignored. Returns None for missing or malformed values.
    """
    if not value or not isinstance(value, str):
        return None

    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes


def parse_amount(value: Any) -> float:
    """Coerce a monetary value to float, 0 when absent or non-numeric."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount
