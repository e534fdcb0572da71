"""Admin dashboard: listing, searching and summarising submissions."""

import asyncio
from typing import Optional

from pydantic import BaseModel

from tireshop.core.enums import AppointmentStatus, QuoteStatus
from tireshop.core.errors import ValidationFailed
from tireshop.models.appointment import Appointment
from tireshop.models.quote import Quote
from tireshop.services.repository import AppointmentRepository, QuoteRepository

ALL_STATUSES = "all"


class DashboardSummary(BaseModel):
    total_quotes: int
    new_quotes: int
    in_progress_quotes: int  # contacted or quoted
    completed_quotes: int
    pending_appointments: int


class Dashboard(BaseModel):
    summary: DashboardSummary
    quotes: list[Quote]
    appointments: list[Appointment]


def filter_quotes(
    quotes: list[Quote],
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> list[Quote]:
    """Substring search over reference/name/email plus exact status match.

    ``status`` of None or ``"all"`` keeps every status. Order is preserved.
    """
    wanted: Optional[QuoteStatus] = None
    if status and status != ALL_STATUSES:
        wanted = QuoteStatus.from_string(status)
        if wanted is None:
            raise ValidationFailed(f"Unknown quote status: {status}")

    needle = (search or "").strip().lower()

    def matches(quote: Quote) -> bool:
        if wanted is not None and quote.status != wanted:
            return False
        if not needle:
            return True
        return any(
            needle in field.lower()
            for field in (quote.reference_number, quote.customer_name, quote.customer_email)
        )

    return [q for q in quotes if matches(q)]


def summarize(quotes: list[Quote], appointments: list[Appointment]) -> DashboardSummary:
    return DashboardSummary(
        total_quotes=len(quotes),
        new_quotes=sum(1 for q in quotes if q.status == QuoteStatus.NEW),
        in_progress_quotes=sum(
            1 for q in quotes if q.status in (QuoteStatus.CONTACTED, QuoteStatus.QUOTED)
        ),
        completed_quotes=sum(1 for q in quotes if q.status == QuoteStatus.COMPLETED),
        pending_appointments=sum(
            1 for a in appointments if a.status == AppointmentStatus.PENDING
        ),
    )


async def load_dashboard(
    quote_repo: QuoteRepository,
    appointment_repo: AppointmentRepository,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> Dashboard:
    quotes, appointments = await asyncio.gather(
        quote_repo.list_all(), appointment_repo.list_all()
    )
    return Dashboard(
        # Counts cover every quote; the list honours the filters.
        summary=summarize(quotes, appointments),
        quotes=filter_quotes(quotes, search, status),
        appointments=appointments,
    )
