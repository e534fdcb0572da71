from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class SubmissionResult(BaseModel, Generic[T]):
    """Outcome of a write followed by a best-effort notification.

    ``persisted`` and ``notified`` fail independently: a failed email never
    rolls back the write, and a failed write means no email was attempted.
    """

    persisted: bool
    notified: bool
    record: Optional[T] = None
    notification_error: Optional[str] = None
