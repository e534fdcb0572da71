"""Staff routes: dashboard, quote editing, appointment decisions, and auth."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from supabase import Client

from tireshop.api.deps import (
    bearer_token,
    get_appointment_repo,
    get_auth_client,
    get_notifier,
    get_quote_repo,
    get_session,
    get_supabase,
    require_admin,
)
from tireshop.models.appointment import Appointment, AppointmentDecisionRequest
from tireshop.models.auth import AuthTokens, LoginRequest, SignupRequest
from tireshop.models.quote import Quote, QuoteUpdate, SendQuoteRequest
from tireshop.models.submission import SubmissionResult
from tireshop.services import appointments as appointment_service
from tireshop.services import auth as auth_service
from tireshop.services import quotes as quote_service
from tireshop.services.admin import Dashboard, load_dashboard
from tireshop.services.auth import AdminSession, is_admin
from tireshop.services.notifications import Notifier
from tireshop.services.repository import AppointmentRepository, QuoteRepository

# Every route here is gated before its handler (and any data fetch) runs.
router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])

auth_router = APIRouter(prefix="/auth")


class SignupResponse(BaseModel):
    user_id: str
    message: str


class SessionInfo(BaseModel):
    user_id: str
    email: Optional[str] = None
    roles: list[str]
    is_admin: bool


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@router.get("/dashboard", response_model=Dashboard)
async def dashboard(
    quote_repo: Annotated[QuoteRepository, Depends(get_quote_repo)],
    appointment_repo: Annotated[AppointmentRepository, Depends(get_appointment_repo)],
    search: Optional[str] = None,
    status: Optional[str] = None,
):
    """Summary counts plus the filtered quote list and all appointments."""
    return await load_dashboard(quote_repo, appointment_repo, search=search, status=status)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


@router.get("/quotes/{quote_id}", response_model=Quote)
async def get_quote(
    quote_id: str,
    repo: Annotated[QuoteRepository, Depends(get_quote_repo)],
):
    return await repo.get(quote_id)


@router.patch("/quotes/{quote_id}", response_model=Quote)
async def edit_quote(
    quote_id: str,
    update: QuoteUpdate,
    repo: Annotated[QuoteRepository, Depends(get_quote_repo)],
):
    return await quote_service.update_quote(repo, quote_id, update)


@router.post("/quotes/{quote_id}/send", response_model=SubmissionResult[Quote])
async def send_quote(
    quote_id: str,
    request: SendQuoteRequest,
    repo: Annotated[QuoteRepository, Depends(get_quote_repo)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
):
    """Email the priced quote; the status only moves to quoted when the email went out."""
    result = await quote_service.send_priced_quote(repo, notifier, quote_id, request)
    if not result.notified:
        raise HTTPException(
            status_code=502,
            detail=f"Quote saved but the email could not be sent: {result.notification_error}",
        )
    return result


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------


@router.get("/appointments", response_model=list[Appointment])
async def list_appointments(
    repo: Annotated[AppointmentRepository, Depends(get_appointment_repo)],
):
    return await repo.list_all()


@router.post(
    "/appointments/{appointment_id}/decision",
    response_model=SubmissionResult[Appointment],
)
async def decide_appointment(
    appointment_id: str,
    request: AppointmentDecisionRequest,
    repo: Annotated[AppointmentRepository, Depends(get_appointment_repo)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
):
    return await appointment_service.decide_appointment(
        repo, notifier, appointment_id, request
    )


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@auth_router.post("/login", response_model=AuthTokens)
def login(
    request: LoginRequest,
    client: Annotated[Client, Depends(get_auth_client)],
):
    return auth_service.sign_in(client, request)


@auth_router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(
    request: SignupRequest,
    client: Annotated[Client, Depends(get_auth_client)],
):
    user_id = auth_service.sign_up(client, request)
    return SignupResponse(
        user_id=user_id,
        message="Please check your email to confirm your account.",
    )


@auth_router.post("/logout", status_code=204)
def logout(
    token: Annotated[str, Depends(bearer_token)],
    client: Annotated[Client, Depends(get_supabase)],
):
    auth_service.sign_out(client, token)


@auth_router.get("/session", response_model=SessionInfo)
async def session_info(session: Annotated[AdminSession, Depends(get_session)]):
    return SessionInfo(
        user_id=session.user_id,
        email=session.email,
        roles=sorted(session.roles),
        is_admin=is_admin(session),
    )
