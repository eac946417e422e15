"""Unit Tests - Supabase appointment store."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from agenda.services.supabase import (
    AppointmentQuery,
    AppointmentStore,
    AppointmentStoreError,
    resolve_amount,
    row_to_appointment,
)

AMOUNT_FIELDS = ["amount", "price", "total"]


def make_client(data=None, error: Exception | None = None) -> MagicMock:
    """Supabase client double whose query builder chains onto itself."""
    client = MagicMock()
    builder = MagicMock()
    for method in ("select", "eq", "gte", "lte", "order", "update"):
        getattr(builder, method).return_value = builder
    if error:
        builder.execute.side_effect = error
    else:
        builder.execute.return_value = MagicMock(data=data)
    client.table.return_value = builder
    return client


class TestRowMapping:
    """Tests for mapping store rows onto appointments."""

    def test_first_non_null_amount_wins(self) -> None:
        assert resolve_amount({"amount": None, "price": 10, "total": 99}, AMOUNT_FIELDS) == 10
        assert resolve_amount({"total": 7}, AMOUNT_FIELDS) == 7
        assert resolve_amount({}, AMOUNT_FIELDS) is None

    def test_row_with_embedded_client(self, sample_rows) -> None:
        appt = row_to_appointment(sample_rows[0], AMOUNT_FIELDS)

        assert appt.id == "a1"
        assert appt.amount == 1000
        assert appt.client.name == "Ana"
        assert appt.day == date(2024, 3, 4)
        assert appt.is_archived is True

    def test_row_with_legacy_price_column(self, sample_rows) -> None:
        appt = row_to_appointment(sample_rows[1], AMOUNT_FIELDS)

        assert appt.amount == 500
        assert appt.client is None
        assert appt.service_label == "unspecified"


class TestAppointmentStore:
    """Tests for AppointmentStore queries."""

    async def test_fetch_by_single_date(self, sample_rows) -> None:
        client = make_client(data=sample_rows)
        store = AppointmentStore(client=client)

        result = await store.fetch_appointments(
            AppointmentQuery(date_equals=date(2024, 3, 4), order_by=[("start_time", True)])
        )

        builder = client.table.return_value
        client.table.assert_called_once_with("appointments")
        builder.eq.assert_called_once_with("date", "2024-03-04")
        builder.gte.assert_not_called()
        builder.order.assert_called_once_with("start_time", desc=False)
        assert [a.id for a in result] == ["a1", "a2"]

    async def test_fetch_by_range(self) -> None:
        client = make_client(data=[])
        store = AppointmentStore(client=client)

        result = await store.fetch_appointments(
            AppointmentQuery(date_from=date(2024, 3, 4), date_to=date(2024, 3, 10))
        )

        builder = client.table.return_value
        builder.gte.assert_called_once_with("date", "2024-03-04")
        builder.lte.assert_called_once_with("date", "2024-03-10")
        assert builder.order.call_count == 2
        assert result == []

    async def test_invalid_rows_are_skipped(self, sample_rows) -> None:
        """Test that rows failing validation are dropped, not raised."""
        bad_rows = [
            {"id": "bad-notes", "date": "2024-03-04", "status": "done", "notes": 42},
            {"date": "2024-03-04", "status": "pending"},
        ]
        store = AppointmentStore(client=make_client(data=[bad_rows[0], *sample_rows, bad_rows[1]]))

        result = await store.fetch_appointments(AppointmentQuery())

        assert [a.id for a in result] == ["a1", "a2"]

    async def test_fetch_error_is_wrapped(self) -> None:
        store = AppointmentStore(client=make_client(error=RuntimeError("boom")))

        with pytest.raises(AppointmentStoreError) as exc_info:
            await store.fetch_appointments(AppointmentQuery())

        assert "boom" in str(exc_info.value)

    async def test_update_status_sends_extra_fields(self, sample_rows) -> None:
        client = make_client(data=[sample_rows[0]])
        store = AppointmentStore(client=client)

        updated = await store.update_appointment_status("a1", "done", {"is_archived": True})

        builder = client.table.return_value
        builder.update.assert_called_once_with({"is_archived": True, "status": "done"})
        builder.eq.assert_called_once_with("id", "a1")
        assert updated.status == "done"

    async def test_update_missing_row_raises(self) -> None:
        store = AppointmentStore(client=make_client(data=[]))

        with pytest.raises(AppointmentStoreError):
            await store.update_appointment_status("nope", "confirmed")

    def test_query_rejects_mixed_filters(self) -> None:
        with pytest.raises(ValueError):
            AppointmentQuery(date_equals=date(2024, 3, 4), date_from=date(2024, 3, 1))
