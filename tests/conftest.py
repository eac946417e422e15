"""Pytest Configuration - Shared fixtures for tests."""

import os
from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment before importing app
os.environ["APP_ENV"] = "development"
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_KEY"] = "test-anon-key"

from agenda.contracts.appointment import Appointment  # noqa: E402


@pytest.fixture
def make_appointment() -> Callable[..., Appointment]:
    """Factory for appointments with sensible defaults."""
    counter = {"n": 0}

    def _make(**fields: Any) -> Appointment:
        counter["n"] += 1
        data: dict[str, Any] = {
            "id": f"appt-{counter['n']}",
            "date": "2024-03-04",
            "start_time": "09:00:00",
            "end_time": "10:00:00",
            "status": "confirmed",
            "service_name": "Cut",
            "amount": 0,
        }
        data.update(fields)
        return Appointment.model_validate(data)

    return _make


@pytest.fixture
def sample_rows() -> list[dict]:
    """Rows as returned by the Supabase appointments select."""
    return [
        {
            "id": "a1",
            "date": "2024-03-04",
            "start_time": "09:00:00",
            "end_time": "10:00:00",
            "status": "done",
            "service_name": "Cut",
            "amount": 1000,
            "notes": None,
            "is_archived": True,
            "clients": {
                "id": "c1",
                "name": "Ana",
                "phone": "+5491155550000",
                "instagram": "@ana",
            },
        },
        {
            "id": "a2",
            "date": "2024-03-04",
            "start_time": None,
            "end_time": None,
            "status": "cancelled",
            "service_name": None,
            "price": "500",
            "clients": None,
        },
    ]


@pytest.fixture
def mock_store() -> MagicMock:
    """Appointment store double with async methods."""
    store = MagicMock()
    store.fetch_appointments = AsyncMock(return_value=[])
    store.update_appointment_status = AsyncMock()
    return store


@pytest.fixture
async def async_client(mock_store: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the FastAPI app, backed by the mock store."""
    from agenda.main import app
    from agenda.services.supabase import get_appointment_store

    app.dependency_overrides[get_appointment_store] = lambda: mock_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
