"""Enums and fixed option lists shared across the shop."""

from enum import Enum


class QuoteStatus(str, Enum):
    """Lifecycle of a quote request, managed by staff."""

    NEW = "new"
    CONTACTED = "contacted"
    QUOTED = "quoted"
    COMPLETED = "completed"
    DECLINED = "declined"

    @classmethod
    def from_string(cls, value: str | None) -> "QuoteStatus | None":
        """Convert string to enum, returning None if invalid."""
        if not value:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


# Allowed forward moves; declined is reachable from every non-terminal status.
QUOTE_TRANSITIONS: dict[QuoteStatus, frozenset[QuoteStatus]] = {
    QuoteStatus.NEW: frozenset(
        {QuoteStatus.CONTACTED, QuoteStatus.QUOTED, QuoteStatus.COMPLETED, QuoteStatus.DECLINED}
    ),
    QuoteStatus.CONTACTED: frozenset(
        {QuoteStatus.QUOTED, QuoteStatus.COMPLETED, QuoteStatus.DECLINED}
    ),
    QuoteStatus.QUOTED: frozenset({QuoteStatus.COMPLETED, QuoteStatus.DECLINED}),
    QuoteStatus.COMPLETED: frozenset(),
    QuoteStatus.DECLINED: frozenset(),
}


def can_transition_quote(current: QuoteStatus, target: QuoteStatus) -> bool:
    """Staying put is always allowed; otherwise consult the transition table."""
    if current == target:
        return True
    return target in QUOTE_TRANSITIONS[current]


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class AppointmentDecision(str, Enum):
    """The two outcomes a staff member can choose for a pending appointment."""

    APPROVED = "approved"
    DECLINED = "declined"


class ContactMethod(str, Enum):
    EMAIL = "email"
    PHONE = "phone"


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class NotificationFunction(str, Enum):
    """Names the email functions are invoked by."""

    APPOINTMENT_NOTIFICATION = "send-appointment-notification"
    APPOINTMENT_STATUS = "send-appointment-status"
    QUOTE_CONFIRMATION = "send-quote-email"
    CUSTOMER_QUOTE = "send-customer-quote"


# Appointment slots are a static list; there is no availability engine.
TIME_SLOTS: tuple[str, ...] = (
    "8:00 AM",
    "9:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "1:00 PM",
    "2:00 PM",
    "3:00 PM",
    "4:00 PM",
    "5:00 PM",
)

AVAILABLE_SERVICES: dict[str, str] = {
    "tire-installation": "Tire Installation",
    "wheel-alignment": "Wheel Alignment",
    "oil-change": "Oil Change",
    "tire-rotation": "Tire Rotation",
    "brake-service": "Brake Service",
}

COMMON_TRIMS: tuple[str, ...] = (
    "Base",
    "LX",
    "EX",
    "EX-L",
    "Touring",
    "Sport",
    "Limited",
    "Premium",
    "SE",
    "SL",
    "SV",
    "Platinum",
)

EARLIEST_MODEL_YEAR = 1990
MIN_QUANTITY = 1
MAX_QUANTITY = 8
