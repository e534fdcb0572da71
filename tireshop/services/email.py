"""Async client for the Resend transactional email API."""

import time
from typing import Any, Optional

import httpx

from tireshop.config import get_settings
from tireshop.core.errors import EmailDeliveryError
from tireshop.core.logging import log_external_call


class EmailSender:
    """Posts HTML emails to Resend's ``/emails`` endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.sender = sender or settings.email_from
        self.base_url = (base_url or settings.resend_base_url).rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=settings.email_timeout)

    async def send(
        self,
        to: list[str],
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> dict[str, Any]:
        """Send one email; returns the provider's JSON (includes the message id)."""
        if not self.api_key:
            raise EmailDeliveryError("RESEND_API_KEY is not set")
        recipients = [r for r in to if r]
        if not recipients:
            raise EmailDeliveryError("Recipient(s) missing")

        payload: dict[str, Any] = {
            "from": self.sender,
            "to": recipients,
            "subject": subject,
            "html": html,
        }
        if reply_to:
            payload["reply_to"] = reply_to

        start = time.time()
        try:
            resp = await self.client.post(
                f"{self.base_url}/emails",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
            )
        except httpx.HTTPError as e:
            log_external_call("resend", "send", False, (time.time() - start) * 1000)
            raise EmailDeliveryError(f"Resend request failed: {e}") from e

        duration_ms = (time.time() - start) * 1000
        if resp.status_code >= 400:
            log_external_call("resend", "send", False, duration_ms)
            raise EmailDeliveryError(
                f"Resend error {resp.status_code}: {resp.text[:300]}",
                status_code=resp.status_code,
            )
        log_external_call("resend", "send", True, duration_ms)
        try:
            return resp.json()
        except ValueError:
            return {}

    async def close(self) -> None:
        await self.client.aclose()


# Singleton
email_sender = EmailSender()
