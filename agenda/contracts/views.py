"""View Contracts - Read-only view-models served to the presentation layer."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from agenda.contracts.appointment import Appointment, AppointmentStatus


class DayCount(BaseModel):
    """Number of appointments shown on a calendar cell."""

    day: date
    count: int = 0
    in_month: bool = True


class StatusSummary(BaseModel):
    """Per-status tallies of a set of appointments."""

    total: int = 0
    pending: int = 0
    confirmed: int = 0
    done: int = 0
    cancelled: int = 0


class ServiceStat(BaseModel):
    """Appointment count for one service label."""

    name: str
    count: int


class Report(BaseModel):
    """Aggregated activity over a report range."""

    total_appointments: int = Field(
        0,
        description="Appointments with a counted status",
    )
    total_minutes_worked: int = Field(
        0,
        description="Sum of appointment durations in minutes",
    )
    total_hours_worked: float = Field(
        0.0,
        description="total_minutes_worked / 60, not rounded",
    )
    total_revenue: float = Field(
        0.0,
        description="Sum of appointment amounts",
    )
    service_breakdown: list[ServiceStat] = Field(
        default_factory=list,
        description="Counts per service, most frequent first",
    )


class AgendaView(BaseModel):
    """Day, week or month agenda ready to render."""

    granularity: str
    reference_date: date
    window_start: date
    window_end: date
    status_group: str
    selected_date: date
    status_filter: str | None = Field(
        None, description="Status the appointment list is narrowed to, if any"
    )
    appointments: list[Appointment] = Field(
        default_factory=list,
        description="Appointments of the selected date, by start time",
    )
    day_counts: list[DayCount] = Field(
        default_factory=list,
        description="Counts for the visible days or the month grid",
    )
    summary: StatusSummary = Field(default_factory=StatusSummary)
    loading: bool = False
    error: str | None = None

    model_config = ConfigDict(frozen=True)


class ReportView(BaseModel):
    """Report numbers for the selected range."""

    range: str
    window_start: date | None = None
    window_end: date | None = None
    report: Report = Field(default_factory=Report)
    loading: bool = False
    error: str | None = None

    model_config = ConfigDict(frozen=True)


class StatusUpdate(BaseModel):
    """Request body for a status change."""

    status: AppointmentStatus
