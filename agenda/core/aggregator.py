"""Appointment Aggregator - Buckets appointments by calendar day.

Appointments are matched on their stored ``date`` value only. Rows whose
date cannot be parsed never reach a bucket.
"""

from collections.abc import Iterable
from datetime import date

from agenda.contracts.appointment import Appointment, AppointmentStatus
from agenda.contracts.views import StatusSummary
from agenda.core.fsm import StatusGroup, in_group
from agenda.core.windows import DateWindow
from agenda.utils.logger import get_logger
from agenda.utils.parsing import parse_clock_minutes

logger = get_logger(__name__)


def start_time_key(appointment: Appointment) -> tuple[bool, int]:
    """Sort key by start time; missing or malformed times sort last."""
    minutes = parse_clock_minutes(appointment.start_time)
    return (minutes is None, minutes or 0)


def sort_by_start_time(appointments: Iterable[Appointment]) -> list[Appointment]:
    """Stable sort by start time."""
    return sorted(appointments, key=start_time_key)


def partition_by_day(
    appointments: Iterable[Appointment],
    window_start: date,
    window_end: date,
) -> dict[date, list[Appointment]]:
    """Group appointments of a window by day.

    Args:
        appointments: Appointments in any order.
        window_start: First day of the window, inclusive.
        window_end: Last day of the window, inclusive.

    Returns:
        One entry per day of the window (empty days included), each list
        ordered by start time.
    """
    window = DateWindow(start=window_start, end=window_end)
    buckets: dict[date, list[Appointment]] = {day: [] for day in window.days()}

    skipped = 0
    for appt in appointments:
        appt_day = appt.day
        if appt_day is None:
            skipped += 1
            continue
        if appt_day in buckets:
            buckets[appt_day].append(appt)

    if skipped:
        logger.warning("appointments_with_invalid_date_skipped", count=skipped)

    return {day: sort_by_start_time(items) for day, items in buckets.items()}


def filter_for_day(
    appointments: Iterable[Appointment],
    day: date,
    status_group: StatusGroup | None,
) -> list[Appointment]:
    """Appointments on ``day`` whose status is in ``status_group``, by start time."""
    return sort_by_start_time(
        appt
        for appt in appointments
        if appt.day == day and in_group(appt, status_group)
    )


def count_for_day(
    appointments: Iterable[Appointment],
    day: date,
    status_group: StatusGroup | None,
) -> int:
    return sum(
        1 for appt in appointments if appt.day == day and in_group(appt, status_group)
    )


def counts_by_day(
    appointments: Iterable[Appointment],
    days: Iterable[date],
    status_group: StatusGroup | None,
) -> dict[date, int]:
    """Per-day counts for a set of visible days, in one pass over the data."""
    counts = {day: 0 for day in days}
    for appt in appointments:
        appt_day = appt.day
        if appt_day in counts and in_group(appt, status_group):
            counts[appt_day] += 1
    return counts


def summarize_statuses(appointments: Iterable[Appointment]) -> StatusSummary:
    """Tally appointments per status; unknown statuses only count in the total."""
    tallies = {status.value: 0 for status in AppointmentStatus}
    total = 0
    for appt in appointments:
        total += 1
        if appt.status in tallies:
            tallies[appt.status] += 1
    return StatusSummary(total=total, **tallies)
