"""Appointment booking and the staff approve/decline decision."""

from datetime import date
from typing import Any, Optional

from tireshop.core.enums import (
    AppointmentDecision,
    AppointmentStatus,
    NotificationFunction,
)
from tireshop.core.errors import InvalidTransitionError
from tireshop.core.logging import get_logger, log_submission
from tireshop.models.appointment import (
    Appointment,
    AppointmentDecisionRequest,
    AppointmentRequestForm,
)
from tireshop.models.submission import SubmissionResult
from tireshop.services.client_storage import VEHICLE_SELECTION_KEY, ClientScope
from tireshop.services.notifications import Notifier
from tireshop.services.repository import AppointmentRepository

logger = get_logger(__name__)


def format_long_date(value: date) -> str:
    """``Friday, March 14, 2025``"""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def notification_body(appointment: Appointment) -> dict[str, Any]:
    body: dict[str, Any] = {
        "customerName": appointment.customer_name,
        "customerEmail": appointment.customer_email,
        "customerPhone": appointment.customer_phone,
        "appointmentDate": format_long_date(appointment.appointment_date),
        "appointmentTime": appointment.appointment_time,
        "services": appointment.service_labels,
    }
    if appointment.vehicle_info:
        body["vehicleInfo"] = appointment.vehicle_info
    if appointment.additional_notes:
        body["additionalNotes"] = appointment.additional_notes
    return body


def status_body(appointment: Appointment, request: AppointmentDecisionRequest) -> dict[str, Any]:
    body: dict[str, Any] = {
        "customerName": appointment.customer_name,
        "customerEmail": appointment.customer_email,
        "appointmentDate": format_long_date(appointment.appointment_date),
        "appointmentTime": appointment.appointment_time,
        "services": appointment.service_labels,
        "status": request.decision.value,
    }
    if request.admin_notes:
        body["adminNotes"] = request.admin_notes
    if request.decision == AppointmentDecision.DECLINED:
        if request.suggested_date:
            body["suggestedDate"] = format_long_date(request.suggested_date)
        if request.suggested_time:
            body["suggestedTime"] = request.suggested_time
    return body


async def submit_appointment(
    form: AppointmentRequestForm,
    repo: AppointmentRepository,
    notifier: Notifier,
    storage: Optional[ClientScope] = None,
) -> SubmissionResult[Appointment]:
    appointment = Appointment(
        customer_name=form.customer_name,
        customer_email=str(form.customer_email),
        customer_phone=form.customer_phone,
        appointment_date=form.appointment_date,
        appointment_time=form.appointment_time,
        services=form.services,
        vehicle_info=form.vehicle_info,
        additional_notes=form.additional_notes,
        status=AppointmentStatus.PENDING,
    )
    saved = await repo.insert(appointment)
    logger.info(
        f"Appointment requested for {saved.appointment_date} {saved.appointment_time}"
    )

    notified, error = await notifier.best_effort(
        NotificationFunction.APPOINTMENT_NOTIFICATION.value, notification_body(saved)
    )

    if storage is not None:
        storage.remove(VEHICLE_SELECTION_KEY)
    log_submission("appointment", True, notified, id=saved.id)

    return SubmissionResult[Appointment](
        persisted=True, notified=notified, record=saved, notification_error=error
    )


async def decide_appointment(
    repo: AppointmentRepository,
    notifier: Notifier,
    appointment_id: str,
    request: AppointmentDecisionRequest,
) -> SubmissionResult[Appointment]:
    """Approve or decline a pending appointment, then tell the customer.

    The decision is final: only pending appointments can be decided. The
    customer email is attempted exactly once and its failure leaves the
    status write in place.
    """
    current = await repo.get(appointment_id)
    if current.status != AppointmentStatus.PENDING:
        raise InvalidTransitionError(current.status.value, request.decision.value)

    saved = await repo.update(
        appointment_id,
        {"status": request.decision.value, "admin_notes": request.admin_notes or None},
    )
    logger.info(f"Appointment {appointment_id} {request.decision.value}")

    notified, error = await notifier.best_effort(
        NotificationFunction.APPOINTMENT_STATUS.value, status_body(saved, request)
    )
    log_submission("appointment_decision", True, notified, id=appointment_id)
    return SubmissionResult[Appointment](
        persisted=True, notified=notified, record=saved, notification_error=error
    )
