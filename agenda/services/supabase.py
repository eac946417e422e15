"""Supabase Service - Appointment queries and status updates."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from agenda.config.settings import get_settings
from agenda.contracts.appointment import Appointment
from agenda.utils.logger import get_logger
from supabase import Client, create_client

logger = get_logger(__name__)

APPOINTMENT_COLUMNS = """
    *,
    clients (
        id,
        name,
        phone,
        instagram
    )
"""


class AppointmentStoreError(Exception):
    """A read or write against the appointment store failed."""


class AppointmentQuery(BaseModel):
    """Filter and ordering for an appointment fetch.

    Either ``date_equals`` or a ``date_from``/``date_to`` range (each bound
    optional) may be given, not both. No date filter means every row.
    """

    date_equals: date | None = None
    date_from: date | None = None
    date_to: date | None = None
    order_by: list[tuple[str, bool]] = Field(
        default_factory=lambda: [("date", True), ("start_time", True)],
        description="(column, ascending) pairs",
    )

    @model_validator(mode="after")
    def check_exclusive(self) -> "AppointmentQuery":
        if self.date_equals and (self.date_from or self.date_to):
            raise ValueError("date_equals cannot be combined with a date range")
        return self


def resolve_amount(row: dict[str, Any], amount_fields: list[str]) -> Any:
    """First non-null value among the candidate money columns."""
    for field in amount_fields:
        if row.get(field) is not None:
            return row[field]
    return None


def row_to_appointment(row: dict[str, Any], amount_fields: list[str]) -> Appointment:
    """Map a store row onto the canonical appointment model."""
    data = dict(row)
    data["amount"] = resolve_amount(row, amount_fields)
    return Appointment.model_validate(data)


class AppointmentStore:
    """Appointment reads and status writes against Supabase."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize the store with a Supabase client.

        Args:
            client: Optional client. When missing, one is built from settings.
        """
        settings = get_settings()
        self.table = settings.appointments_table
        self.amount_fields = list(settings.amount_fields)
        if client:
            self.client = client
        else:
            self.client = self._create_client()

    def _create_client(self) -> Client:
        """Create a Supabase client from the settings."""
        settings = get_settings()

        # Backend access prefers the service key
        key = settings.supabase_service_key or settings.supabase_key

        if not key:
            logger.warning(
                "supabase_not_configured",
                message="Supabase credentials missing. Store operations will fail.",
            )
            if not settings.is_development:
                raise ValueError("Supabase credentials are required outside development")

        new_client = create_client(settings.supabase_url, key)

        logger.info(
            "supabase_client_created",
            using_service_key=key == settings.supabase_service_key,
            key_preview=key[:5] + "..." if key else "None",
        )
        return new_client

    def _process_appointment_rows(self, rows: list[dict[str, Any]]) -> list[Appointment]:
        """Map rows onto appointments, skipping the ones that do not validate."""
        appointments = []
        for row in rows:
            try:
                appointments.append(row_to_appointment(row, self.amount_fields))
            except ValidationError as e:
                logger.warning(
                    "appointment_row_skipped",
                    appointment_id=row.get("id"),
                    error_count=e.error_count(),
                    fields=sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]}),
                )
        return appointments

    async def fetch_appointments(self, query: AppointmentQuery) -> list[Appointment]:
        """Fetch appointments matching a query.

        Args:
            query: Date filter and ordering.

        Returns:
            Appointments in the requested order.

        Raises:
            AppointmentStoreError: If the request fails.
        """
        try:
            builder = self.client.table(self.table).select(APPOINTMENT_COLUMNS)

            if query.date_equals:
                builder = builder.eq("date", query.date_equals.isoformat())
            if query.date_from:
                builder = builder.gte("date", query.date_from.isoformat())
            if query.date_to:
                builder = builder.lte("date", query.date_to.isoformat())

            for column, ascending in query.order_by:
                builder = builder.order(column, desc=not ascending)

            result = builder.execute()
        except Exception as e:
            logger.error(
                "appointments_fetch_failed",
                error=str(e),
                date_equals=str(query.date_equals),
                date_from=str(query.date_from),
                date_to=str(query.date_to),
            )
            raise AppointmentStoreError(str(e) or "appointments fetch failed") from e

        rows = result.data or []
        appointments = self._process_appointment_rows(rows)

        logger.info(
            "appointments_fetched",
            count=len(appointments),
            skipped=len(rows) - len(appointments),
            date_equals=str(query.date_equals),
            date_from=str(query.date_from),
            date_to=str(query.date_to),
        )
        return appointments

    async def update_appointment_status(
        self,
        appointment_id: str,
        status: str,
        extra_fields: dict[str, Any] | None = None,
    ) -> Appointment:
        """Write a new status (and denormalized fields) for one appointment.

        Args:
            appointment_id: Appointment id.
            status: New status value.
            extra_fields: Additional columns, e.g. ``is_archived``.

        Returns:
            The updated appointment as stored.

        Raises:
            AppointmentStoreError: If the write fails or no row matches.
        """
        update = {**(extra_fields or {}), "status": status}

        try:
            result = (
                self.client.table(self.table)
                .update(update)
                .eq("id", appointment_id)
                .execute()
            )
        except Exception as e:
            logger.error(
                "appointment_status_update_failed",
                appointment_id=appointment_id,
                status=status,
                error=str(e),
            )
            raise AppointmentStoreError(str(e) or "status update failed") from e

        if not result or not result.data:
            logger.warning(
                "appointment_status_update_no_rows",
                appointment_id=appointment_id,
            )
            raise AppointmentStoreError(f"Appointment {appointment_id} not found")

        logger.info(
            "appointment_status_updated",
            appointment_id=appointment_id,
            status=status,
            fields=sorted(update),
        )
        return row_to_appointment(result.data[0], self.amount_fields)


_appointment_store: AppointmentStore | None = None


def get_appointment_store() -> AppointmentStore:
    """Return the shared store, creating it on first use."""
    global _appointment_store
    if _appointment_store is None:
        _appointment_store = AppointmentStore()
    return _appointment_store
