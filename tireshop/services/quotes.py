"""Quote submission pipeline and the staff-side quote actions.

Submission order: reference number → insert (status ``new``) → best-effort
confirmation email → ``lastQuote`` saved for the confirmation view. An insert
failure aborts before any email; an email failure never undoes the insert.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from tireshop.config import get_settings
from tireshop.core.enums import NotificationFunction, QuoteStatus, can_transition_quote
from tireshop.core.errors import InvalidTransitionError, PersistenceError, ValidationFailed
from tireshop.core.logging import get_logger, log_submission
from tireshop.models.quote import Quote, QuoteRequestForm, QuoteUpdate, SendQuoteRequest
from tireshop.models.submission import SubmissionResult
from tireshop.models.vehicle import VehicleSelection
from tireshop.services.client_storage import LAST_QUOTE_KEY, VEHICLE_SELECTION_KEY, ClientScope
from tireshop.services.notifications import Notifier
from tireshop.services.reference import generate_reference_number
from tireshop.services.repository import QuoteRepository
from tireshop.services.tire_size import lookup_tire_size

logger = get_logger(__name__)

# Attempts at a fresh reference number when the unique constraint rejects one.
MAX_REFERENCE_ATTEMPTS = 3
UNIQUE_VIOLATION = "23505"

NO_VEHICLE = "Please complete the tire finder first."
AMOUNT_REQUIRED = "Please enter a quote amount before sending."


def _is_unique_violation(error: PersistenceError) -> bool:
    return getattr(error.cause, "code", None) == UNIQUE_VIOLATION


def build_quote(
    form: QuoteRequestForm,
    vehicle: VehicleSelection,
    tire_size: str,
    reference_number: str,
) -> Quote:
    return Quote(
        reference_number=reference_number,
        customer_name=form.full_name,
        customer_email=str(form.email),
        customer_phone=form.phone,
        zip_code=form.zip_code,
        vehicle_year=vehicle.year,
        vehicle_make=vehicle.make,
        vehicle_model=vehicle.model,
        vehicle_trim=vehicle.trim,
        tire_size=tire_size,
        quantity=form.quantity,
        installation_required=form.installation,
        wheel_alignment=form.wheel_alignment,
        oil_change=form.oil_change,
        preferred_contact_method=form.preferred_contact,
        best_contact_time=form.best_time or None,
        additional_notes=form.notes or None,
        status=QuoteStatus.NEW,
    )


def confirmation_email_body(quote: Quote) -> dict[str, Any]:
    return {
        "customerName": quote.customer_name,
        "customerEmail": quote.customer_email,
        "referenceNumber": quote.reference_number,
        "vehicleYear": quote.vehicle_year,
        "vehicleMake": quote.vehicle_make,
        "vehicleModel": quote.vehicle_model,
        "vehicleTrim": quote.vehicle_trim,
        "tireSize": quote.tire_size,
        "quantity": quote.quantity,
        "installation": quote.installation_required,
        "wheelAlignment": quote.wheel_alignment,
        "oilChange": quote.oil_change,
    }


def priced_quote_email_body(quote: Quote) -> dict[str, Any]:
    body = confirmation_email_body(quote)
    body["quoteAmount"] = quote.quote_amount
    if quote.quote_notes:
        body["quoteNotes"] = quote.quote_notes
    return body


async def submit_quote(
    form: QuoteRequestForm,
    vehicle: Optional[VehicleSelection],
    tire_size: Optional[str],
    repo: QuoteRepository,
    notifier: Notifier,
    storage: Optional[ClientScope] = None,
    now: Optional[datetime] = None,
) -> SubmissionResult[Quote]:
    if vehicle is None or not vehicle.is_complete:
        raise ValidationFailed(NO_VEHICLE)
    tire_size = tire_size or lookup_tire_size(vehicle)
    prefix = get_settings().reference_prefix

    saved: Optional[Quote] = None
    for attempt in range(1, MAX_REFERENCE_ATTEMPTS + 1):
        reference = generate_reference_number(prefix, now=now)
        try:
            saved = await repo.insert(build_quote(form, vehicle, tire_size, reference))
            break
        except PersistenceError as e:
            if not _is_unique_violation(e) or attempt == MAX_REFERENCE_ATTEMPTS:
                raise
            logger.warning(f"Reference {reference} already taken, regenerating")

    logger.info(f"Quote {saved.reference_number} created for {vehicle.display_name}")

    notified, error = await notifier.best_effort(
        NotificationFunction.QUOTE_CONFIRMATION.value, confirmation_email_body(saved)
    )

    if storage is not None:
        storage.set(LAST_QUOTE_KEY, saved.model_dump(mode="json"))
        storage.remove(VEHICLE_SELECTION_KEY)
    log_submission("quote", True, notified, reference=saved.reference_number)

    return SubmissionResult[Quote](
        persisted=True, notified=notified, record=saved, notification_error=error
    )


def last_quote(storage: ClientScope) -> Optional[Quote]:
    """The quote shown on the confirmation page, if this client submitted one."""
    stored = storage.get(LAST_QUOTE_KEY)
    if not isinstance(stored, dict):
        return None
    return Quote.model_validate(stored)


async def update_quote(
    repo: QuoteRepository, quote_id: str, update: QuoteUpdate
) -> Quote:
    """Apply the admin editor's status/amount/notes to a quote."""
    current = await repo.get(quote_id)
    changes: dict[str, Any] = {}

    if update.status is not None and update.status != current.status:
        if not can_transition_quote(current.status, update.status):
            raise InvalidTransitionError(current.status.value, update.status.value)
        changes["status"] = update.status.value
    if "quote_amount" in update.model_fields_set:
        changes["quote_amount"] = update.quote_amount
    if "quote_notes" in update.model_fields_set:
        changes["quote_notes"] = update.quote_notes or None

    if not changes:
        return current
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()
    return await repo.update(quote_id, changes)


async def send_priced_quote(
    repo: QuoteRepository,
    notifier: Notifier,
    quote_id: str,
    request: SendQuoteRequest,
) -> SubmissionResult[Quote]:
    """Email the customer a priced quote and mark it ``quoted``.

    The amount and notes are saved first so the email matches what is stored.
    Sending a price is the move to ``quoted``; a status picked in the editor
    in the same action is not applied.
    """
    if request.quote_amount is None:
        raise ValidationFailed(AMOUNT_REQUIRED)

    current = await repo.get(quote_id)
    if not can_transition_quote(current.status, QuoteStatus.QUOTED):
        raise InvalidTransitionError(current.status.value, QuoteStatus.QUOTED.value)

    saved = await update_quote(
        repo,
        quote_id,
        QuoteUpdate(quote_amount=request.quote_amount, quote_notes=request.quote_notes),
    )

    response = await notifier.invoke(
        NotificationFunction.CUSTOMER_QUOTE.value, priced_quote_email_body(saved)
    )
    if not response.ok:
        error = str(response.body.get("error", f"status {response.status_code}"))
        logger.error(f"Sending quote {saved.reference_number} failed: {error}")
        return SubmissionResult[Quote](
            persisted=True, notified=False, record=saved, notification_error=error
        )

    if saved.status != QuoteStatus.QUOTED:
        saved = await repo.update(
            quote_id,
            {
                "status": QuoteStatus.QUOTED.value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
        )
    logger.info(f"Quote {saved.reference_number} sent to {saved.customer_email}")
    return SubmissionResult[Quote](persisted=True, notified=True, record=saved)
