"""FastAPI dependency injection."""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client

from tireshop.core.errors import AuthenticationError, AuthorizationError
from tireshop.services.auth import AdminSession, is_admin, resolve_session
from tireshop.services.client_storage import ClientScope, ClientStorage, client_storage
from tireshop.services.db import get_supabase_client, new_supabase_client
from tireshop.services.email import EmailSender, email_sender
from tireshop.services.nhtsa import NHTSAClient, nhtsa_client
from tireshop.services.notifications import Notifier
from tireshop.services.repository import AppointmentRepository, QuoteRepository


def get_supabase() -> Client:
    """Dependency for the shared Supabase client."""
    return get_supabase_client()


def get_auth_client() -> Client:
    """A fresh client for sign-in/sign-up so user sessions never land on the shared one."""
    return new_supabase_client()


async def get_nhtsa() -> NHTSAClient:
    """Dependency for NHTSA client."""
    return nhtsa_client


def get_email_sender() -> EmailSender:
    return email_sender


def get_notifier(sender: Annotated[EmailSender, Depends(get_email_sender)]) -> Notifier:
    return Notifier(sender)


def get_client_storage() -> ClientStorage:
    return client_storage


def get_client_scope(
    storage: Annotated[ClientStorage, Depends(get_client_storage)],
    x_client_id: Annotated[str | None, Header()] = None,
) -> ClientScope:
    """Per-browser storage, keyed by the ``X-Client-Id`` header."""
    if not x_client_id:
        raise HTTPException(status_code=400, detail="Missing X-Client-Id header")
    return ClientScope(storage, x_client_id)


def get_optional_client_scope(
    storage: Annotated[ClientStorage, Depends(get_client_storage)],
    x_client_id: Annotated[str | None, Header()] = None,
) -> Optional[ClientScope]:
    """Like ``get_client_scope`` but ``None`` for clients that never sent the header."""
    return ClientScope(storage, x_client_id) if x_client_id else None


def get_quote_repo(client: Annotated[Client, Depends(get_supabase)]) -> QuoteRepository:
    return QuoteRepository(client)


def get_appointment_repo(
    client: Annotated[Client, Depends(get_supabase)],
) -> AppointmentRepository:
    return AppointmentRepository(client)


def bearer_token(authorization: Annotated[str | None, Header()] = None) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise AuthenticationError("Missing session")
    return authorization.split(" ", 1)[1].strip()


def get_session(
    token: Annotated[str, Depends(bearer_token)],
    client: Annotated[Client, Depends(get_supabase)],
) -> AdminSession:
    """Resolve the caller's session once per request."""
    return resolve_session(client, token)


def require_admin(session: Annotated[AdminSession, Depends(get_session)]) -> AdminSession:
    """Gate for every admin route; runs before any data is fetched."""
    if not is_admin(session):
        raise AuthorizationError("You need admin privileges to access this page.")
    return session
