"""Services package - External service integrations."""

from agenda.services.supabase import (
    AppointmentQuery,
    AppointmentStore,
    AppointmentStoreError,
    get_appointment_store,
)

__all__ = [
    "AppointmentQuery",
    "AppointmentStore",
    "AppointmentStoreError",
    "get_appointment_store",
]
