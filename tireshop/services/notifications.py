"""Email notification functions.

Four independent request/response handlers, invoked by name with a JSON body:

* ``send-appointment-notification``: new appointment, to staff
* ``send-appointment-status``: approve/decline decision, to the customer
* ``send-quote-email``: quote request received, to the customer plus a staff copy
* ``send-customer-quote``: priced quote, to the customer

Each validates its body first (400 with an issue list, nothing sent), renders
an autoescaped Jinja2 template, and posts it through the email sender
(provider failure → 500).
"""

from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError

from tireshop.config import get_settings
from tireshop.core.enums import NotificationFunction
from tireshop.core.errors import EmailDeliveryError
from tireshop.core.logging import get_logger, log_error, log_notification
from tireshop.models.notifications import (
    AppointmentNotificationPayload,
    AppointmentStatusPayload,
    CustomerQuotePayload,
    NotificationResponse,
    QuoteConfirmationPayload,
    issues_from,
    requested_services,
)
from tireshop.services.email import EmailSender, email_sender

logger = get_logger(__name__)

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

templates = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _shop_context() -> dict[str, str]:
    settings = get_settings()
    return {
        "name": settings.shop_name,
        "phone": settings.shop_phone,
        "address": settings.shop_address,
        "dashboard_url": settings.dashboard_url,
    }


def render(template: str, **context: Any) -> str:
    return templates.get_template(template).render(shop=_shop_context(), **context)


def _invalid(function: str, exc: ValidationError) -> NotificationResponse:
    issues = issues_from(exc)
    logger.error(f"{function}: validation failed: {issues}")
    return NotificationResponse(
        status_code=400,
        body={"error": "Invalid input data", "details": issues},
    )


def _provider_failed(function: str, exc: EmailDeliveryError) -> NotificationResponse:
    log_error(f"{function}: email provider failed", exc)
    return NotificationResponse(status_code=500, body={"error": str(exc)})


async def send_appointment_notification(
    body: Any, sender: Optional[EmailSender] = None
) -> NotificationResponse:
    name = NotificationFunction.APPOINTMENT_NOTIFICATION.value
    try:
        payload = AppointmentNotificationPayload.model_validate(body)
    except ValidationError as e:
        return _invalid(name, e)

    logger.info("Sending appointment notification email")
    html = render("appointment_notification.html", p=payload)
    try:
        result = await (sender or email_sender).send(
            [get_settings().admin_email],
            "New Appointment Request",
            html,
            reply_to=payload.customer_email,
        )
    except EmailDeliveryError as e:
        return _provider_failed(name, e)
    return NotificationResponse(status_code=200, body={"success": True, "email": result})


async def send_appointment_status(
    body: Any, sender: Optional[EmailSender] = None
) -> NotificationResponse:
    name = NotificationFunction.APPOINTMENT_STATUS.value
    try:
        payload = AppointmentStatusPayload.model_validate(body)
    except ValidationError as e:
        return _invalid(name, e)

    approved = payload.status == "approved"
    subject = (
        "Your Appointment is Confirmed!" if approved else "Update on Your Appointment Request"
    )
    logger.info(f"Sending appointment {payload.status} email to customer")
    html = render("appointment_status.html", p=payload, approved=approved)
    try:
        result = await (sender or email_sender).send([payload.customer_email], subject, html)
    except EmailDeliveryError as e:
        return _provider_failed(name, e)
    return NotificationResponse(status_code=200, body={"success": True, "email": result})


async def send_quote_email(
    body: Any, sender: Optional[EmailSender] = None
) -> NotificationResponse:
    name = NotificationFunction.QUOTE_CONFIRMATION.value
    try:
        payload = QuoteConfirmationPayload.model_validate(body)
    except ValidationError as e:
        return _invalid(name, e)

    sender = sender or email_sender
    services = requested_services(payload)
    logger.info(f"Sending quote confirmation email for {payload.reference_number}")
    try:
        result = await sender.send(
            [payload.customer_email],
            f"Quote Request Received - {payload.reference_number}",
            render("quote_confirmation.html", p=payload, services=services),
        )
    except EmailDeliveryError as e:
        return _provider_failed(name, e)

    # The staff copy is secondary; the customer already has their confirmation.
    admin_notified = False
    admin_email = get_settings().admin_email
    if admin_email:
        try:
            await sender.send(
                [admin_email],
                f"New Quote Request - {payload.reference_number}",
                render("quote_admin_copy.html", p=payload, services=services),
                reply_to=payload.customer_email,
            )
            admin_notified = True
        except EmailDeliveryError as e:
            log_error(f"{name}: staff copy failed", e, reference=payload.reference_number)

    return NotificationResponse(
        status_code=200,
        body={"success": True, "email": result, "adminNotified": admin_notified},
    )


async def send_customer_quote(
    body: Any, sender: Optional[EmailSender] = None
) -> NotificationResponse:
    name = NotificationFunction.CUSTOMER_QUOTE.value
    try:
        payload = CustomerQuotePayload.model_validate(body)
    except ValidationError as e:
        return _invalid(name, e)

    logger.info(f"Sending priced quote {payload.reference_number} to customer")
    html = render("customer_quote.html", p=payload, services=requested_services(payload))
    try:
        result = await (sender or email_sender).send(
            [payload.customer_email],
            f"Your Quote is Ready - {payload.reference_number}",
            html,
        )
    except EmailDeliveryError as e:
        return _provider_failed(name, e)
    return NotificationResponse(status_code=200, body={"success": True, "email": result})


Handler = Callable[[Any, Optional[EmailSender]], Awaitable[NotificationResponse]]

FUNCTIONS: dict[str, Handler] = {
    NotificationFunction.APPOINTMENT_NOTIFICATION.value: send_appointment_notification,
    NotificationFunction.APPOINTMENT_STATUS.value: send_appointment_status,
    NotificationFunction.QUOTE_CONFIRMATION.value: send_quote_email,
    NotificationFunction.CUSTOMER_QUOTE.value: send_customer_quote,
}


async def invoke_function(
    name: str, body: Any, sender: Optional[EmailSender] = None
) -> NotificationResponse:
    """Invoke a notification function by name; unknown names return 404."""
    handler = FUNCTIONS.get(name)
    if handler is None:
        response = NotificationResponse(status_code=404, body={"error": f"Unknown function: {name}"})
    else:
        response = await handler(body, sender)
    log_notification(name, response.status_code)
    return response


class Notifier:
    """Fires notification functions for the submission pipelines."""

    def __init__(self, sender: Optional[EmailSender] = None) -> None:
        self.sender = sender

    async def invoke(self, name: str, body: dict[str, Any]) -> NotificationResponse:
        return await invoke_function(name, body, self.sender)

    async def best_effort(self, name: str, body: dict[str, Any]) -> tuple[bool, Optional[str]]:
        """Invoke and report ``(notified, error)``; failures are logged, never raised."""
        try:
            response = await self.invoke(name, body)
        except Exception as e:
            log_error(f"Notification {name} raised", e)
            return False, str(e)
        if not response.ok:
            error = str(response.body.get("error", f"status {response.status_code}"))
            log_error(f"Notification {name} failed", status=response.status_code, error=error)
            return False, error
        return True, None
