"""Appointment Contract - Models for appointments, clients and services."""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from agenda.utils.parsing import parse_amount, parse_iso_date

DEFAULT_SERVICE_LABEL = "unspecified"


class AppointmentStatus(str, Enum):
    """Possible appointment statuses."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    DONE = "done"
    CANCELLED = "cancelled"


KNOWN_STATUSES = frozenset(status.value for status in AppointmentStatus)


class ClientRef(BaseModel):
    """Client data embedded in an appointment row."""

    id: str | None = None
    name: str | None = None
    phone: str | None = None
    instagram: str | None = None


class Client(BaseModel):
    """Client schema (owned by the store)."""

    id: str = Field(
        ...,
        description="Unique client id",
    )
    name: str = Field(
        ...,
        description="Client name",
    )
    phone: str | None = Field(
        None,
        description="Phone number",
    )
    instagram: str | None = Field(
        None,
        description="Instagram handle",
    )

    model_config = ConfigDict(from_attributes=True)


class Service(BaseModel):
    """Service catalogue entry (owned by the store)."""

    id: str = Field(
        ...,
        description="Unique service id",
    )
    name: str = Field(
        ...,
        description="Service name",
    )
    category: str | None = Field(
        None,
        description="Service category",
    )
    price: float = Field(
        0,
        description="List price",
    )
    duration_min: int | None = Field(
        None,
        description="Expected duration in minutes",
    )
    color: str | None = Field(
        None,
        description="Display colour",
    )
    is_active: bool = Field(
        True,
        description="Whether the service can be booked",
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        """Missing or malformed prices read as zero."""
        return parse_amount(v)


class Appointment(BaseModel):
    """Appointment as read from the store.

    ``date`` and ``status`` keep the stored text verbatim; readers use
    ``day`` and ``display_status`` for the interpreted values.
    """

    id: str = Field(
        ...,
        description="Opaque id assigned by the store",
    )
    date: str | None = Field(
        None,
        description="Calendar date, YYYY-MM-DD",
    )
    start_time: str | None = Field(
        None,
        description="Start time, HH:MM[:SS]",
    )
    end_time: str | None = Field(
        None,
        description="End time, HH:MM[:SS]",
    )
    status: str = Field(
        AppointmentStatus.PENDING.value,
        description="Stored status",
    )
    service_name: str | None = Field(
        None,
        description="Service label",
    )
    amount: float = Field(
        0,
        description="Charged amount",
    )
    notes: str | None = Field(
        None,
        description="Free-text notes",
    )
    client: ClientRef | None = Field(
        None,
        validation_alias=AliasChoices("client", "clients"),
        description="Embedded client",
    )
    is_archived: bool = Field(
        False,
        description="Denormalized archive flag",
    )

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "date": "2024-03-04",
                "start_time": "09:00:00",
                "end_time": "10:00:00",
                "status": "confirmed",
                "service_name": "Cut",
                "amount": 1000,
                "clients": {"id": "c-1", "name": "Ana", "phone": "+5491155550000"},
            }
        },
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> str:
        """Store ids may arrive as UUID objects or integers."""
        return str(v)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        """Keep strings verbatim, render date objects as ISO text."""
        if isinstance(v, dt.date):
            return v.isoformat()[:10]
        return v

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> str:
        """Accept enum members, keep unknown text as stored."""
        if v is None:
            return AppointmentStatus.PENDING.value
        if isinstance(v, AppointmentStatus):
            return v.value
        return str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        """Absent or non-numeric amounts count as zero."""
        return parse_amount(v)

    @field_validator("is_archived", mode="before")
    @classmethod
    def coerce_archived(cls, v: Any) -> bool:
        return bool(v)

    @property
    def day(self) -> dt.date | None:
        """Parsed calendar date, None when the stored value is unreadable."""
        return parse_iso_date(self.date)

    @property
    def display_status(self) -> AppointmentStatus:
        """Status for display; unknown values show as pending."""
        if self.status in KNOWN_STATUSES:
            return AppointmentStatus(self.status)
        return AppointmentStatus.PENDING

    @property
    def service_label(self) -> str:
        return self.service_name or DEFAULT_SERVICE_LABEL
