from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from tireshop.core.enums import MAX_QUANTITY, MIN_QUANTITY, ContactMethod, QuoteStatus
from tireshop.models.vehicle import VehicleSelection
from tireshop.services.validation import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    NOTES_MAX_LENGTH,
    is_valid_phone,
    is_valid_zip,
)


class QuoteRequestForm(BaseModel):
    """Contact and preference fields collected on the quote request page."""

    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    phone: str
    zip_code: str
    preferred_contact: ContactMethod = ContactMethod.EMAIL
    best_time: Optional[str] = None
    quantity: int = Field(default=4, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    installation: bool = True
    wheel_alignment: bool = False
    oil_change: bool = False
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)
    terms: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def check_email_length(cls, v: Any) -> Any:
        if isinstance(v, str) and len(v) > EMAIL_MAX_LENGTH:
            raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not is_valid_phone(v):
            raise ValueError("Please enter a valid phone number")
        return v

    @field_validator("zip_code")
    @classmethod
    def check_zip(cls, v: str) -> str:
        if not is_valid_zip(v):
            raise ValueError("Please enter a valid 5-digit zip code")
        return v

    @field_validator("terms")
    @classmethod
    def check_terms(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must accept the terms")
        return v


class QuoteSubmission(BaseModel):
    """Body of ``POST /api/quotes``: the form plus the finder's output."""

    form: QuoteRequestForm
    vehicle: Optional[VehicleSelection] = None
    tire_size: Optional[str] = None


class Quote(BaseModel):
    """A row of the ``quotes`` table."""

    id: Optional[str] = None
    reference_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    zip_code: str
    vehicle_year: str
    vehicle_make: str
    vehicle_model: str
    vehicle_trim: str
    tire_size: str
    quantity: int
    installation_required: bool = False
    wheel_alignment: bool = False
    oil_change: bool = False
    preferred_contact_method: ContactMethod = ContactMethod.EMAIL
    best_contact_time: Optional[str] = None
    additional_notes: Optional[str] = None
    status: QuoteStatus = QuoteStatus.NEW
    quote_amount: Optional[float] = None
    quote_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_row(self) -> dict[str, Any]:
        """Column dict for an insert; server-managed columns are left out."""
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at"},
        )


class QuoteUpdate(BaseModel):
    """Editable fields on the admin quote detail view."""

    status: Optional[QuoteStatus] = None
    quote_amount: Optional[float] = Field(default=None, ge=0, le=1_000_000)
    quote_notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)


class SendQuoteRequest(QuoteUpdate):
    """``Send quote`` action: the editor's values, amount required at send time."""
