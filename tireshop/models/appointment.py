from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from tireshop.core.enums import (
    AVAILABLE_SERVICES,
    TIME_SLOTS,
    AppointmentDecision,
    AppointmentStatus,
)
from tireshop.services.validation import (
    APPOINTMENT_NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    NOTES_MAX_LENGTH,
    VEHICLE_INFO_MAX_LENGTH,
    is_valid_appointment_date,
    is_valid_phone,
)


class AppointmentRequestForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_name: str = Field(
        ..., min_length=NAME_MIN_LENGTH, max_length=APPOINTMENT_NAME_MAX_LENGTH
    )
    customer_email: EmailStr
    customer_phone: str
    appointment_date: date
    appointment_time: str
    services: list[str] = Field(..., min_length=1)
    vehicle_info: Optional[str] = Field(default=None, max_length=VEHICLE_INFO_MAX_LENGTH)
    additional_notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)

    @field_validator("customer_phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not is_valid_phone(v):
            raise ValueError("Please enter a valid phone number")
        return v

    @field_validator("appointment_date")
    @classmethod
    def check_date(cls, v: date) -> date:
        if not is_valid_appointment_date(v):
            raise ValueError("Appointment date cannot be in the past")
        return v

    @field_validator("appointment_time")
    @classmethod
    def check_time(cls, v: str) -> str:
        if v not in TIME_SLOTS:
            raise ValueError("Please select a time")
        return v

    @field_validator("services")
    @classmethod
    def check_services(cls, v: list[str]) -> list[str]:
        unknown = [s for s in v if s not in AVAILABLE_SERVICES]
        if unknown:
            raise ValueError(f"Unknown services: {', '.join(unknown)}")
        # keep first occurrence order, drop repeats
        return list(dict.fromkeys(v))


class Appointment(BaseModel):
    """A row of the ``appointments`` table."""

    id: Optional[str] = None
    customer_name: str
    customer_email: str
    customer_phone: str
    appointment_date: date
    appointment_time: str
    services: list[str]
    vehicle_info: Optional[str] = None
    additional_notes: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def service_labels(self) -> list[str]:
        return [AVAILABLE_SERVICES.get(s, s) for s in self.services]

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(mode="json", exclude={"id", "created_at"})
        row["vehicle_info"] = self.vehicle_info or None
        row["additional_notes"] = self.additional_notes or None
        return row


class AppointmentDecisionRequest(BaseModel):
    decision: AppointmentDecision
    admin_notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)
    suggested_date: Optional[date] = None
    suggested_time: Optional[str] = None

    @field_validator("suggested_time")
    @classmethod
    def check_suggested_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in TIME_SLOTS:
            raise ValueError("Suggested time must be one of the offered slots")
        return v
