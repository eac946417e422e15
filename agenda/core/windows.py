"""Date windows - Day/week/month bounds and the month calendar grid.

All arithmetic is on naive calendar dates. Weeks start on Monday.
"""

import calendar
from datetime import date, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from agenda.utils.parsing import parse_iso_date


class Granularity(str, Enum):
    """Calendar unit used to size a window."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class DateWindow(BaseModel):
    """Contiguous inclusive date range."""

    start: date = Field(..., description="First day, inclusive")
    end: date = Field(..., description="Last day, inclusive")

    @model_validator(mode="after")
    def check_order(self) -> "DateWindow":
        if self.end < self.start:
            raise ValueError(f"window ends before it starts: {self.start} > {self.end}")
        return self

    def days(self) -> list[date]:
        """Every date in the window, in order."""
        return [
            self.start + timedelta(days=offset)
            for offset in range((self.end - self.start).days + 1)
        ]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class CalendarDay(BaseModel):
    """A cell of the month grid."""

    day: date
    in_month: bool


def coerce_date(value: Any, today: date | None = None) -> date:
    """Read a reference date, falling back to today when it is unusable."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return today or date.today()
    return parsed


def start_of_week(day: date) -> date:
    """Monday on or before ``day`` (Sunday belongs to the previous week)."""
    return day - timedelta(days=day.weekday())


def end_of_week(day: date) -> date:
    """Sunday on or after ``day``."""
    return start_of_week(day) + timedelta(days=6)


def week_days(reference_date: date) -> list[date]:
    """The Monday-to-Sunday strip containing ``reference_date``."""
    start = start_of_week(reference_date)
    return [start + timedelta(days=offset) for offset in range(7)]


def window_bounds(reference_date: date, granularity: Granularity) -> DateWindow:
    """Compute the canonical window of ``granularity`` around a reference date.

    Args:
        reference_date: Any date inside the wanted window.
        granularity: Day, week or month.

    Returns:
        Inclusive window bounds.
    """
    granularity = Granularity(granularity)

    if granularity == Granularity.DAY:
        return DateWindow(start=reference_date, end=reference_date)

    if granularity == Granularity.WEEK:
        start = start_of_week(reference_date)
        return DateWindow(start=start, end=start + timedelta(days=6))

    last_day = calendar.monthrange(reference_date.year, reference_date.month)[1]
    return DateWindow(
        start=reference_date.replace(day=1),
        end=reference_date.replace(day=last_day),
    )


def calendar_grid(reference_date: date) -> list[CalendarDay]:
    """Monday-aligned month grid, padded with days of the adjacent months.

    The grid runs from the Monday on/before the 1st to the Sunday on/after
    the last day of the month, so it always holds whole weeks.
    """
    month = window_bounds(reference_date, Granularity.MONTH)
    grid = DateWindow(start=start_of_week(month.start), end=end_of_week(month.end))
    return [
        CalendarDay(day=day, in_month=month.contains(day)) for day in grid.days()
    ]


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month length."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def advance(reference_date: date, granularity: Granularity, direction: int) -> date:
    """Move the reference date one unit back (-1) or forward (+1).

    Raises:
        ValueError: If direction is not -1 or +1.
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or 1, got {direction}")

    granularity = Granularity(granularity)
    if granularity == Granularity.DAY:
        return reference_date + timedelta(days=direction)
    if granularity == Granularity.WEEK:
        return reference_date + timedelta(days=7 * direction)
    return add_months(reference_date, direction)
