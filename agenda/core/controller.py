"""View Controllers - Per-screen agenda and report state.

Each screen owns one controller instance. A controller issues exactly one
store fetch per user action; a fetch started later supersedes any fetch
still in flight, whose response is then dropped.
"""

from collections.abc import Callable, Collection
from datetime import date
from typing import Any

from agenda.contracts.appointment import (
    DEFAULT_SERVICE_LABEL,
    Appointment,
    AppointmentStatus,
)
from agenda.contracts.views import AgendaView, DayCount, Report, ReportView
from agenda.core.aggregator import (
    counts_by_day,
    filter_for_day,
    summarize_statuses,
)
from agenda.core.fsm import (
    StatusGroup,
    filter_by_status,
    persistence_fields,
    transition,
)
from agenda.core.reports import (
    DEFAULT_COUNTED_STATUSES,
    ReportRange,
    compute_report,
    report_window,
)
from agenda.core.windows import (
    DateWindow,
    Granularity,
    advance,
    calendar_grid,
    coerce_date,
    week_days,
    window_bounds,
)
from agenda.services.supabase import (
    AppointmentQuery,
    AppointmentStore,
    AppointmentStoreError,
)
from agenda.utils.logger import get_logger

logger = get_logger(__name__)


class AgendaController:
    """State behind the day, week and month agenda views.

    Attributes:
        reference_date: Date the current window is built around.
        granularity: Active calendar unit.
        status_group: Active status filter.
        selected_date: Day whose appointments are listed.
        status_filter: Exact status the selected-day list is narrowed to.
        appointments: Last successfully fetched appointments.
        loading: True while the newest fetch is in flight.
        error: Message of the last failed operation, if any.
    """

    def __init__(
        self,
        store: AppointmentStore,
        reference_date: date | str | None = None,
        granularity: Granularity = Granularity.DAY,
        status_group: StatusGroup = StatusGroup.ACTIVE,
        archive_on_cancel: bool = False,
        status_filter: AppointmentStatus | str | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.clock = clock
        self.archive_on_cancel = archive_on_cancel
        self.reference_date = coerce_date(reference_date, clock())
        self.granularity = Granularity(granularity)
        self.status_group = StatusGroup(status_group)
        self.selected_date = self.reference_date
        self.status_filter: AppointmentStatus | None = (
            AppointmentStatus(status_filter) if status_filter else None
        )
        self.appointments: list[Appointment] = []
        self.loading = False
        self.error: str | None = None
        self._generation = 0
        # (generation, appointment id, written fields)
        self._confirmed: list[tuple[int, str, dict[str, Any]]] = []

    @property
    def window(self) -> DateWindow:
        return window_bounds(self.reference_date, self.granularity)

    def _build_query(self) -> AppointmentQuery:
        window = self.window
        if self.granularity == Granularity.DAY:
            return AppointmentQuery(
                date_equals=window.start,
                order_by=[("start_time", True)],
            )
        return AppointmentQuery(date_from=window.start, date_to=window.end)

    def _reapply_confirmed(
        self, appointments: list[Appointment], generation: int
    ) -> list[Appointment]:
        """Re-apply status writes confirmed while fetch ``generation`` was in flight.

        A write recorded at generation ``g`` happened after every fetch up to
        ``g`` was issued, so those fetches may still carry the old status.
        Later fetches already reflect it.
        """
        self._confirmed = [c for c in self._confirmed if c[0] >= generation]
        if not self._confirmed:
            return appointments

        changes = {appt_id: update for _, appt_id, update in self._confirmed}
        return [
            appt.model_copy(update=changes[appt.id]) if appt.id in changes else appt
            for appt in appointments
        ]

    async def refresh(self) -> None:
        """Fetch the current window, keeping the previous data on failure."""
        self._generation += 1
        generation = self._generation
        query = self._build_query()
        self.loading = True

        try:
            appointments = await self.store.fetch_appointments(query)
        except AppointmentStoreError as e:
            if generation != self._generation:
                logger.info("stale_fetch_error_discarded", generation=generation)
                return
            self.error = str(e)
            logger.warning(
                "agenda_fetch_failed",
                granularity=self.granularity.value,
                reference_date=self.reference_date.isoformat(),
                error=self.error,
            )
            return
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.info(
                "stale_fetch_discarded",
                generation=generation,
                current_generation=self._generation,
            )
            return

        self.appointments = self._reapply_confirmed(appointments, generation)
        self.error = None
        logger.info(
            "agenda_refreshed",
            granularity=self.granularity.value,
            reference_date=self.reference_date.isoformat(),
            count=len(appointments),
        )

    async def set_date(self, value: date | str | None) -> None:
        """Jump to another reference date; unusable values mean today."""
        self.reference_date = coerce_date(value, self.clock())
        self.selected_date = self.reference_date
        await self.refresh()

    async def set_granularity(self, granularity: Granularity) -> None:
        self.granularity = Granularity(granularity)
        await self.refresh()

    async def set_status_group(self, status_group: StatusGroup) -> None:
        self.status_group = StatusGroup(status_group)
        await self.refresh()

    async def move(self, direction: int) -> None:
        """Step one window back (-1) or forward (+1).

        The selected day moves along with the window.
        """
        self.reference_date = advance(self.reference_date, self.granularity, direction)
        self.selected_date = advance(self.selected_date, self.granularity, direction)
        if not self.window.contains(self.selected_date):
            self.selected_date = self.reference_date
        await self.refresh()

    def select_date(self, value: date | str | None) -> None:
        """Pick a day inside the loaded data; no fetch is needed."""
        self.selected_date = coerce_date(value, self.clock())

    def set_status_filter(self, status: AppointmentStatus | str | None) -> None:
        """Narrow the selected-day list to one status; None shows all."""
        self.status_filter = AppointmentStatus(status) if status else None

    async def change_status(
        self, appointment_id: str, new_status: AppointmentStatus | str
    ) -> Appointment:
        """Persist a status change, then apply it locally.

        Raises:
            ValueError: If new_status is not a known status.
            AppointmentStoreError: If the store rejects the write. Local
                state is left untouched.
        """
        fields = persistence_fields(new_status, self.archive_on_cancel)
        status = fields.pop("status")

        try:
            stored = await self.store.update_appointment_status(
                appointment_id, status, fields
            )
        except AppointmentStoreError as e:
            self.error = str(e)
            logger.warning(
                "status_change_failed",
                appointment_id=appointment_id,
                status=status,
                error=self.error,
            )
            raise

        updated: Appointment | None = None
        for index, appt in enumerate(self.appointments):
            if appt.id == appointment_id:
                updated = transition(appt, status)
                if "is_archived" in fields:
                    updated = updated.model_copy(
                        update={"is_archived": fields["is_archived"]}
                    )
                self.appointments[index] = updated

        self._confirmed.append(
            (self._generation, appointment_id, {**fields, "status": status})
        )
        self.error = None
        logger.info(
            "status_changed",
            appointment_id=appointment_id,
            status=status,
            applied_locally=updated is not None,
        )
        return updated or stored

    def view(self) -> AgendaView:
        """Build the view-model for the active granularity."""
        window = self.window

        if self.granularity == Granularity.MONTH:
            grid = calendar_grid(self.reference_date)
            counts = counts_by_day(
                self.appointments, [cell.day for cell in grid], self.status_group
            )
            day_counts = [
                DayCount(day=cell.day, count=counts[cell.day], in_month=cell.in_month)
                for cell in grid
            ]
        else:
            if self.granularity == Granularity.WEEK:
                visible = week_days(self.reference_date)
            else:
                visible = [self.reference_date]
            counts = counts_by_day(self.appointments, visible, self.status_group)
            day_counts = [DayCount(day=day, count=counts[day]) for day in visible]

        selected = filter_by_status(
            filter_for_day(self.appointments, self.selected_date, self.status_group),
            self.status_filter,
        )
        summary = summarize_statuses(
            appt for appt in self.appointments if appt.day == self.selected_date
        )

        return AgendaView(
            granularity=self.granularity.value,
            reference_date=self.reference_date,
            window_start=window.start,
            window_end=window.end,
            status_group=self.status_group.value,
            selected_date=self.selected_date,
            status_filter=self.status_filter.value if self.status_filter else None,
            appointments=selected,
            day_counts=day_counts,
            summary=summary,
            loading=self.loading,
            error=self.error,
        )


class ReportsController:
    """State behind the reports screen."""

    def __init__(
        self,
        store: AppointmentStore,
        report_range: ReportRange = ReportRange.LAST_7_DAYS,
        statuses_counted: Collection[str] = DEFAULT_COUNTED_STATUSES,
        default_label: str = DEFAULT_SERVICE_LABEL,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.clock = clock
        self.report_range = ReportRange(report_range)
        self.statuses_counted = frozenset(statuses_counted)
        self.default_label = default_label
        self.appointments: list[Appointment] = []
        self.report = Report()
        self.window: DateWindow | None = None
        self.loading = False
        self.error: str | None = None
        self._generation = 0

    async def refresh(self) -> None:
        """Fetch the selected range and recompute the report."""
        self._generation += 1
        generation = self._generation
        window = report_window(self.report_range, self.clock())
        query = AppointmentQuery(
            date_from=window.start if window else None,
            date_to=window.end if window else None,
            order_by=[("date", False), ("start_time", False)],
        )
        self.loading = True

        try:
            appointments = await self.store.fetch_appointments(query)
        except AppointmentStoreError as e:
            if generation != self._generation:
                logger.info("stale_fetch_error_discarded", generation=generation)
                return
            self.error = str(e)
            logger.warning(
                "report_fetch_failed",
                range=self.report_range.value,
                error=self.error,
            )
            return
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.info(
                "stale_fetch_discarded",
                generation=generation,
                current_generation=self._generation,
            )
            return

        self.appointments = appointments
        self.window = window
        self.report = compute_report(
            appointments, self.statuses_counted, self.default_label
        )
        self.error = None
        logger.info(
            "report_computed",
            range=self.report_range.value,
            total_appointments=self.report.total_appointments,
            total_minutes_worked=self.report.total_minutes_worked,
        )

    async def set_range(self, report_range: ReportRange) -> None:
        self.report_range = ReportRange(report_range)
        await self.refresh()

    def view(self) -> ReportView:
        return ReportView(
            range=self.report_range.value,
            window_start=self.window.start if self.window else None,
            window_end=self.window.end if self.window else None,
            report=self.report,
            loading=self.loading,
            error=self.error,
        )
