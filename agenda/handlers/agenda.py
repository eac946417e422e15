"""Agenda Handlers - Serve agenda and report view-models over HTTP."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from agenda.config.settings import Settings, get_settings
from agenda.contracts.appointment import Appointment, AppointmentStatus
from agenda.contracts.views import AgendaView, ReportView, StatusUpdate
from agenda.core.controller import AgendaController, ReportsController
from agenda.core.fsm import StatusGroup
from agenda.core.reports import ReportRange
from agenda.core.windows import Granularity
from agenda.services.supabase import AppointmentStore, get_appointment_store

router = APIRouter(tags=["agenda"])


@router.get("/agenda", response_model=AgendaView)
async def get_agenda(
    reference_date: str | None = Query(None, alias="date"),
    granularity: Granularity = Granularity.DAY,
    status_group: StatusGroup = StatusGroup.ACTIVE,
    selected: date | None = None,
    status: AppointmentStatus | None = None,
    store: AppointmentStore = Depends(get_appointment_store),
    settings: Settings = Depends(get_settings),
) -> AgendaView:
    """Agenda for a day, week or month.

    Args:
        reference_date: Date inside the wanted window; unreadable values mean today.
        granularity: day, week or month.
        status_group: active or archived.
        selected: Day whose appointments are listed (defaults to the reference date).
        status: Only list appointments with this status.

    Returns:
        Agenda view-model.
    """
    controller = AgendaController(
        store,
        reference_date=reference_date,
        granularity=granularity,
        status_group=status_group,
        archive_on_cancel=settings.archive_on_cancel,
        status_filter=status,
    )
    if selected:
        controller.select_date(selected)
    await controller.refresh()

    view = controller.view()
    if view.error:
        raise HTTPException(status_code=502, detail=view.error)
    return view


@router.get("/reports", response_model=ReportView)
async def get_report(
    report_range: ReportRange = Query(ReportRange.LAST_7_DAYS, alias="range"),
    store: AppointmentStore = Depends(get_appointment_store),
    settings: Settings = Depends(get_settings),
) -> ReportView:
    """Report numbers for the last 7 days, last 30 days or all time."""
    controller = ReportsController(
        store,
        report_range=report_range,
        statuses_counted=settings.report_statuses,
        default_label=settings.default_service_label,
    )
    await controller.refresh()

    view = controller.view()
    if view.error:
        raise HTTPException(status_code=502, detail=view.error)
    return view


@router.patch("/appointments/{appointment_id}/status", response_model=Appointment)
async def update_status(
    appointment_id: str,
    payload: StatusUpdate,
    store: AppointmentStore = Depends(get_appointment_store),
    settings: Settings = Depends(get_settings),
) -> Appointment:
    """Change an appointment's status.

    Returns:
        The appointment as stored after the change. Store failures surface
        as 502 through the application error handler.
    """
    controller = AgendaController(store, archive_on_cancel=settings.archive_on_cancel)
    return await controller.change_status(appointment_id, payload.status)
