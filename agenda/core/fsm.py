"""Status State Machine - Appointment status lifecycle and status groups."""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from agenda.contracts.appointment import Appointment, AppointmentStatus


class StatusGroup(str, Enum):
    """Filter groups used by the agenda views."""

    ACTIVE = "active"
    ARCHIVED = "archived"


GROUP_STATUSES: dict[StatusGroup, frozenset[str]] = {
    StatusGroup.ACTIVE: frozenset(
        {AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value}
    ),
    StatusGroup.ARCHIVED: frozenset(
        {AppointmentStatus.DONE.value, AppointmentStatus.CANCELLED.value}
    ),
}

# The business corrects mistakes freely: every status may move to every status.
VALID_TRANSITIONS: dict[AppointmentStatus, list[AppointmentStatus]] = {
    status: list(AppointmentStatus) for status in AppointmentStatus
}


def can_transition(current: str, next_status: AppointmentStatus | str) -> bool:
    """Check whether ``current`` may move to ``next_status``.

    Unknown stored statuses behave like pending.
    """
    try:
        target = AppointmentStatus(next_status)
    except ValueError:
        return False
    try:
        source = AppointmentStatus(current)
    except ValueError:
        source = AppointmentStatus.PENDING
    return target in VALID_TRANSITIONS[source]


def transition(
    appointment: Appointment, new_status: AppointmentStatus | str
) -> Appointment:
    """Return a copy of the appointment carrying ``new_status``.

    The input is not mutated. Persisting the change is the caller's job,
    see ``persistence_fields``.

    Raises:
        ValueError: If new_status is not one of the four known statuses.
    """
    if not can_transition(appointment.status, new_status):
        raise ValueError(
            f"Invalid transition: {appointment.status} -> {new_status}"
        )
    return appointment.model_copy(
        update={"status": AppointmentStatus(new_status).value}
    )


def persistence_fields(
    new_status: AppointmentStatus | str, archive_on_cancel: bool = False
) -> dict[str, Any]:
    """Fields to write to the store for a status change.

    ``is_archived`` is set only for ``done``. Cancelled appointments are in
    the archived group but keep the flag unset unless ``archive_on_cancel``.
    """
    target = AppointmentStatus(new_status)
    fields: dict[str, Any] = {"status": target.value}
    if target == AppointmentStatus.DONE:
        fields["is_archived"] = True
    elif target == AppointmentStatus.CANCELLED and archive_on_cancel:
        fields["is_archived"] = True
    return fields


def is_active(status: str) -> bool:
    return status in GROUP_STATUSES[StatusGroup.ACTIVE]


def is_archived(status: str) -> bool:
    return status in GROUP_STATUSES[StatusGroup.ARCHIVED]


def in_group(appointment: Appointment, group: StatusGroup | None) -> bool:
    """Group membership; None matches every appointment."""
    if group is None:
        return True
    return appointment.status in GROUP_STATUSES[StatusGroup(group)]


def filter_by_group(
    appointments: Iterable[Appointment], group: StatusGroup
) -> list[Appointment]:
    """Appointments whose stored status belongs to ``group``, order preserved.

    Unknown statuses belong to no group.
    """
    return [appt for appt in appointments if in_group(appt, group)]


def filter_by_status(
    appointments: Iterable[Appointment], status: AppointmentStatus | str | None
) -> list[Appointment]:
    """Appointments with exactly ``status``; None keeps everything."""
    if status is None:
        return list(appointments)
    wanted = AppointmentStatus(status).value
    return [appt for appt in appointments if appt.status == wanted]
