"""Contracts package - Pydantic schemas for data validation."""

from agenda.contracts.appointment import (
    Appointment,
    AppointmentStatus,
    Client,
    ClientRef,
    Service,
)
from agenda.contracts.views import (
    AgendaView,
    DayCount,
    Report,
    ReportView,
    ServiceStat,
    StatusSummary,
    StatusUpdate,
)

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Client",
    "ClientRef",
    "Service",
    "AgendaView",
    "DayCount",
    "Report",
    "ReportView",
    "ServiceStat",
    "StatusSummary",
    "StatusUpdate",
]
