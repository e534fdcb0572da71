"""Request schemas for the email functions.

Bodies arrive in camelCase (the shape the storefront sends). Every string is
trimmed and length-capped; anything that fails here is rejected with a 400
before an email is built.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class AppointmentNotificationPayload(_Payload):
    """New appointment request, sent to staff."""

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=1, max_length=30)
    appointment_date: str = Field(..., min_length=1, max_length=100)
    appointment_time: str = Field(..., min_length=1, max_length=20)
    services: list[str] = Field(..., min_length=1, max_length=10)
    vehicle_info: Optional[str] = Field(default=None, max_length=500)
    additional_notes: Optional[str] = Field(default=None, max_length=1000)


class AppointmentStatusPayload(_Payload):
    """Staff decision on an appointment, sent to the customer."""

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: EmailStr
    appointment_date: str = Field(..., min_length=1, max_length=100)
    appointment_time: str = Field(..., min_length=1, max_length=20)
    services: list[str] = Field(..., min_length=1, max_length=10)
    status: Literal["approved", "declined"]
    admin_notes: Optional[str] = Field(default=None, max_length=1000)
    suggested_date: Optional[str] = Field(default=None, max_length=100)
    suggested_time: Optional[str] = Field(default=None, max_length=20)


class QuoteConfirmationPayload(_Payload):
    """Quote request received; sent to the customer with a copy to staff."""

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: EmailStr
    reference_number: str = Field(..., min_length=1, max_length=50)
    vehicle_year: int = Field(..., ge=1900, le=2100)
    vehicle_make: str = Field(..., min_length=1, max_length=50)
    vehicle_model: str = Field(..., min_length=1, max_length=50)
    vehicle_trim: str = Field(..., min_length=1, max_length=50)
    tire_size: str = Field(..., min_length=1, max_length=50)
    quantity: int = Field(..., ge=1, le=10)
    installation: bool = False
    wheel_alignment: bool = False
    oil_change: bool = False


class CustomerQuotePayload(_Payload):
    """Priced quote, sent to the customer from the admin detail view."""

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: EmailStr
    reference_number: str = Field(..., min_length=1, max_length=50)
    vehicle_year: int = Field(..., ge=1900, le=2100)
    vehicle_make: str = Field(..., min_length=1, max_length=50)
    vehicle_model: str = Field(..., min_length=1, max_length=50)
    vehicle_trim: str = Field(..., min_length=1, max_length=50)
    tire_size: str = Field(..., min_length=1, max_length=50)
    quantity: int = Field(..., ge=1, le=10)
    installation: bool
    wheel_alignment: bool
    oil_change: bool
    quote_amount: float = Field(..., ge=0, le=1_000_000)
    quote_notes: Optional[str] = Field(default=None, max_length=1000)


def requested_services(payload: QuoteConfirmationPayload | CustomerQuotePayload) -> list[str]:
    services = []
    if payload.installation:
        services.append("Tire Installation")
    if payload.wheel_alignment:
        services.append("Wheel Alignment")
    if payload.oil_change:
        services.append("Oil Change")
    return services


def issues_from(exc: ValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic error into ``{path, message, code}`` issues."""
    return [
        {
            "path": [str(p) for p in err["loc"]],
            "message": err["msg"],
            "code": err["type"],
        }
        for err in exc.errors()
    ]


class NotificationResponse(BaseModel):
    """What a notification function returns: an HTTP status and a JSON body."""

    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
