"""Report Engine - Hours worked, revenue and service popularity.

Confirmed appointments are counted together with done ones: they are
committed work even if they have not happened yet.
"""

from collections.abc import Collection, Iterable
from datetime import date, timedelta
from enum import Enum

from agenda.contracts.appointment import (
    DEFAULT_SERVICE_LABEL,
    Appointment,
    AppointmentStatus,
)
from agenda.contracts.views import Report, ServiceStat
from agenda.core.windows import DateWindow
from agenda.utils.parsing import parse_clock_minutes

DEFAULT_COUNTED_STATUSES = frozenset(
    {AppointmentStatus.DONE.value, AppointmentStatus.CONFIRMED.value}
)


class ReportRange(str, Enum):
    """Date ranges offered on the reports screen."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    ALL = "all"


RANGE_LENGTH_DAYS: dict[ReportRange, int] = {
    ReportRange.LAST_7_DAYS: 7,
    ReportRange.LAST_30_DAYS: 30,
}


def report_window(report_range: ReportRange, today: date) -> DateWindow | None:
    """Inclusive window ending today, or None for the unbounded range."""
    length = RANGE_LENGTH_DAYS.get(ReportRange(report_range))
    if length is None:
        return None
    return DateWindow(start=today - timedelta(days=length - 1), end=today)


def minutes_between(start: str | None, end: str | None) -> int:
    """Minutes from ``start`` to ``end`` (``HH:MM[:SS]``).

    Returns 0 when either value is missing or malformed, or when the end
    does not come after the start.
    """
    start_min = parse_clock_minutes(start)
    end_min = parse_clock_minutes(end)
    if start_min is None or end_min is None or end_min <= start_min:
        return 0
    return end_min - start_min


def service_breakdown(
    appointments: Iterable[Appointment],
    default_label: str = DEFAULT_SERVICE_LABEL,
) -> list[ServiceStat]:
    """Appointment count per service name, most frequent first.

    Ties keep the order in which the names were first seen.
    """
    counts: dict[str, int] = {}
    for appt in appointments:
        name = appt.service_name or default_label
        counts[name] = counts.get(name, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [ServiceStat(name=name, count=count) for name, count in ranked]


def compute_report(
    appointments: Iterable[Appointment],
    statuses_counted: Collection[str] = DEFAULT_COUNTED_STATUSES,
    default_label: str = DEFAULT_SERVICE_LABEL,
) -> Report:
    """Aggregate appointments into report numbers.

    Args:
        appointments: Appointments already narrowed to the report range.
        statuses_counted: Statuses that count as worked.
        default_label: Service label used for appointments without one.

    Returns:
        Report with totals and the ranked service breakdown.
    """
    counted = {
        status.value if isinstance(status, AppointmentStatus) else status
        for status in statuses_counted
    }
    completed = [appt for appt in appointments if appt.status in counted]

    total_minutes = sum(
        minutes_between(appt.start_time, appt.end_time) for appt in completed
    )

    return Report(
        total_appointments=len(completed),
        total_minutes_worked=total_minutes,
        total_hours_worked=total_minutes / 60,
        total_revenue=sum(appt.amount for appt in completed),
        service_breakdown=service_breakdown(completed, default_label),
    )
