"""Field-level validation rules shared by the request forms."""

import re
from datetime import date

# North-American 10-digit number with optional parentheses and separators:
# "(555) 123-4567", "555-123-4567", "555.123.4567", "5551234567".
PHONE_PATTERN = re.compile(r"^\(?([0-9]{3})\)?[-. ]?([0-9]{3})[-. ]?([0-9]{4})$")
ZIP_PATTERN = re.compile(r"^\d{5}$")
TIRE_SIZE_PATTERN = re.compile(r"(\d+)/(\d+)([A-Z])(\d+)")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
APPOINTMENT_NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
NOTES_MAX_LENGTH = 1000
VEHICLE_INFO_MAX_LENGTH = 500


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_PATTERN.match(value or ""))


def is_valid_zip(value: str) -> bool:
    return bool(ZIP_PATTERN.match(value or ""))


def is_valid_appointment_date(value: date, today: date | None = None) -> bool:
    """Today and any future date are bookable; anything earlier is not."""
    today = today or date.today()
    return value >= today
