"""Tests for form validation rules and quote reference numbers."""

import random
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from tireshop.models.appointment import AppointmentDecisionRequest, AppointmentRequestForm
from tireshop.models.auth import SignupRequest
from tireshop.models.quote import QuoteRequestForm
from tireshop.services.reference import generate_reference_number, is_reference_number
from tireshop.services.validation import (
    is_valid_appointment_date,
    is_valid_phone,
    is_valid_zip,
)

QUOTE_FORM = {
    "full_name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "(555) 123-4567",
    "zip_code": "43026",
    "quantity": 4,
    "terms": True,
}


def _appointment_form(**overrides):
    data = {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "555-123-4567",
        "appointment_date": date.today() + timedelta(days=3),
        "appointment_time": "9:00 AM",
        "services": ["tire-installation"],
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Phone / zip
# ---------------------------------------------------------------------------


class TestPhone:
    @pytest.mark.parametrize(
        "value", ["(555) 123-4567", "555-123-4567", "555.123.4567", "5551234567"]
    )
    def test_accepted(self, value):
        assert is_valid_phone(value)

    @pytest.mark.parametrize("value", ["555-1234", "abc", "", "+1 555 123 4567"])
    def test_rejected(self, value):
        assert not is_valid_phone(value)


class TestZip:
    def test_five_digits(self):
        assert is_valid_zip("43026")

    @pytest.mark.parametrize("value", ["1234", "123456", "abcde", "43026-1234"])
    def test_rejected(self, value):
        assert not is_valid_zip(value)


# ---------------------------------------------------------------------------
# Quote form
# ---------------------------------------------------------------------------


class TestQuoteForm:
    def test_valid_form(self):
        form = QuoteRequestForm(**QUOTE_FORM)
        assert form.installation is True
        assert form.quantity == 4

    @pytest.mark.parametrize("quantity", [1, 8])
    def test_quantity_bounds_inclusive(self, quantity):
        assert QuoteRequestForm(**{**QUOTE_FORM, "quantity": quantity}).quantity == quantity

    @pytest.mark.parametrize("quantity", [0, 9, -1])
    def test_quantity_out_of_range(self, quantity):
        with pytest.raises(ValidationError):
            QuoteRequestForm(**{**QUOTE_FORM, "quantity": quantity})

    def test_terms_required(self):
        with pytest.raises(ValidationError):
            QuoteRequestForm(**{**QUOTE_FORM, "terms": False})

    def test_bad_phone(self):
        with pytest.raises(ValidationError):
            QuoteRequestForm(**{**QUOTE_FORM, "phone": "12345"})

    def test_bad_zip(self):
        with pytest.raises(ValidationError):
            QuoteRequestForm(**{**QUOTE_FORM, "zip_code": "4302"})

    def test_short_name(self):
        with pytest.raises(ValidationError):
            QuoteRequestForm(**{**QUOTE_FORM, "full_name": "J"})

    def test_notes_cap(self):
        with pytest.raises(ValidationError):
            QuoteRequestForm(**{**QUOTE_FORM, "notes": "x" * 1001})

    @pytest.mark.parametrize("name", ["   ", " A "])
    def test_name_length_checked_after_trimming(self, name):
        with pytest.raises(ValidationError):
            QuoteRequestForm(**{**QUOTE_FORM, "full_name": name})

    def test_name_trimmed(self):
        form = QuoteRequestForm(**{**QUOTE_FORM, "full_name": "  Jane Doe "})
        assert form.full_name == "Jane Doe"


# ---------------------------------------------------------------------------
# Appointment form
# ---------------------------------------------------------------------------


class TestAppointmentDate:
    def test_today_is_bookable(self):
        today = date(2025, 3, 14)
        assert is_valid_appointment_date(today, today=today)

    def test_yesterday_is_not(self):
        today = date(2025, 3, 14)
        assert not is_valid_appointment_date(today - timedelta(days=1), today=today)


class TestAppointmentForm:
    def test_valid(self):
        form = AppointmentRequestForm(**_appointment_form())
        assert form.services == ["tire-installation"]

    def test_past_date_rejected(self):
        with pytest.raises(ValidationError):
            AppointmentRequestForm(
                **_appointment_form(appointment_date=date.today() - timedelta(days=1))
            )

    def test_unknown_slot_rejected(self):
        with pytest.raises(ValidationError):
            AppointmentRequestForm(**_appointment_form(appointment_time="7:00 AM"))

    def test_services_required(self):
        with pytest.raises(ValidationError):
            AppointmentRequestForm(**_appointment_form(services=[]))

    def test_unknown_service_rejected(self):
        with pytest.raises(ValidationError):
            AppointmentRequestForm(**_appointment_form(services=["detailing"]))

    def test_duplicate_services_collapsed(self):
        form = AppointmentRequestForm(
            **_appointment_form(services=["oil-change", "oil-change", "tire-rotation"])
        )
        assert form.services == ["oil-change", "tire-rotation"]

    @pytest.mark.parametrize("name", ["   ", " A "])
    def test_name_length_checked_after_trimming(self, name):
        with pytest.raises(ValidationError):
            AppointmentRequestForm(**_appointment_form(customer_name=name))

    def test_name_cap(self):
        with pytest.raises(ValidationError):
            AppointmentRequestForm(**_appointment_form(customer_name="N" * 101))

    def test_vehicle_info_cap(self):
        with pytest.raises(ValidationError):
            AppointmentRequestForm(**_appointment_form(vehicle_info="x" * 600))

    def test_suggested_time_must_be_a_slot(self):
        with pytest.raises(ValidationError):
            AppointmentDecisionRequest(decision="declined", suggested_time="6:30 PM")


class TestSignup:
    def test_passwords_must_match(self):
        with pytest.raises(ValidationError):
            SignupRequest(
                full_name="Staff Member",
                email="staff@example.com",
                password="secret123",
                confirm_password="secret124",
            )


# ---------------------------------------------------------------------------
# Reference numbers
# ---------------------------------------------------------------------------


class TestReferenceNumber:
    def test_format(self):
        assert is_reference_number(generate_reference_number("TS"))

    def test_uses_utc_date(self):
        # 22:30 in UTC-5 is already the next day in UTC
        local = datetime(2025, 3, 14, 22, 30, tzinfo=timezone(timedelta(hours=-5)))
        ref = generate_reference_number("TS", now=local, rng=random.Random(1))
        assert ref.startswith("TS-20250315-")

    def test_suffix_range(self):
        rng = random.Random(42)
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        for _ in range(200):
            suffix = int(generate_reference_number("TS", now=now, rng=rng).rsplit("-", 1)[1])
            assert 1000 <= suffix <= 9999

    def test_prefix_uppercased(self):
        assert generate_reference_number("ts").startswith("TS-")

    @pytest.mark.parametrize("value", ["TS-2025031-1234", "ts-20250314-1234", "TS-20250314-123"])
    def test_rejects_malformed(self, value):
        assert not is_reference_number(value)
