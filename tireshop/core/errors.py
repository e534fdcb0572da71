"""Domain exceptions.

Services raise these; the API layer maps them onto HTTP status codes.
"""

from typing import Any


class TireShopError(Exception):
    """Base class for all application errors."""


class ValidationFailed(TireShopError):
    """Input failed schema validation before any remote call was made."""

    def __init__(self, message: str, issues: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.issues = issues or []


class PersistenceError(TireShopError):
    """The backing store rejected an insert, select or update."""

    def __init__(self, operation: str, table: str, cause: Exception | None = None):
        super().__init__(f"{operation} on {table} failed")
        self.operation = operation
        self.table = table
        self.cause = cause


class NotFoundError(TireShopError):
    """A record looked up by id does not exist."""


class InvalidTransitionError(TireShopError):
    """A status change is not allowed from the record's current status."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class WizardError(TireShopError):
    """The vehicle finder cannot advance from its current step."""


class ProviderError(TireShopError):
    """The external vehicle data provider failed or returned garbage."""


class EmailDeliveryError(TireShopError):
    """The transactional email provider refused or failed a send."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(TireShopError):
    """No active session, or the session token was rejected."""


class AuthorizationError(TireShopError):
    """The session is valid but lacks the admin role."""
