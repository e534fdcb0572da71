"""Staff sessions on top of Supabase Auth.

A session is resolved once per protected request from the bearer token and
handed to the route as an immutable value; the admin check is a pure
predicate over it.
"""

from dataclasses import dataclass, field

from supabase import Client

from tireshop.core.enums import Role
from tireshop.core.errors import AuthenticationError
from tireshop.core.logging import get_logger
from tireshop.models.auth import AuthTokens, LoginRequest, SignupRequest
from tireshop.services.repository import RoleRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class AdminSession:
    user_id: str
    email: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)


def is_admin(session: AdminSession | None) -> bool:
    return session is not None and Role.ADMIN.value in session.roles


def resolve_session(client: Client, token: str) -> AdminSession:
    """Look up the token's user and their roles.

    Raises ``AuthenticationError`` when there is no token or Supabase does
    not recognise it. Role lookup failures propagate as ``PersistenceError``.
    """
    if not token:
        raise AuthenticationError("Missing session")
    try:
        response = client.auth.get_user(token)
    except Exception as e:
        logger.info(f"Session rejected: {e}")
        raise AuthenticationError("Invalid or expired session") from e

    user = getattr(response, "user", None)
    if user is None:
        raise AuthenticationError("Invalid or expired session")

    roles = RoleRepository(client).roles_for(str(user.id))
    return AdminSession(user_id=str(user.id), email=getattr(user, "email", None), roles=roles)


def sign_in(client: Client, request: LoginRequest) -> AuthTokens:
    try:
        response = client.auth.sign_in_with_password(
            {"email": str(request.email), "password": request.password}
        )
    except Exception as e:
        logger.info(f"Login failed for {request.email}: {e}")
        raise AuthenticationError("Invalid email or password. Please try again.") from e

    session = getattr(response, "session", None)
    if session is None or response.user is None:
        raise AuthenticationError("Invalid email or password. Please try again.")
    return AuthTokens(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user_id=str(response.user.id),
        email=response.user.email,
    )


def sign_up(client: Client, request: SignupRequest) -> str:
    """Create a staff account; returns the new user id. Roles are granted elsewhere."""
    try:
        response = client.auth.sign_up(
            {
                "email": str(request.email),
                "password": request.password,
                "options": {"data": {"full_name": request.full_name}},
            }
        )
    except Exception as e:
        if "already registered" in str(e):
            raise AuthenticationError(
                "An account with this email already exists. Please login instead."
            ) from e
        raise AuthenticationError(f"Sign up failed: {e}") from e
    if response.user is None:
        raise AuthenticationError("Sign up failed")
    logger.info(f"Staff account created for {request.email}")
    return str(response.user.id)


def sign_out(client: Client, token: str) -> None:
    """Revoke the session behind ``token`` (needs the service-role key)."""
    try:
        client.auth.admin.sign_out(token)
    except Exception as e:
        raise AuthenticationError(f"Logout failed: {e}") from e
