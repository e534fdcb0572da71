"""Structured logging for the shop API.

One ``tireshop`` logger writes ``key=value`` lines to stdout; modules log
through child loggers from ``get_logger``. The ``log_*`` helpers keep the
request, database, provider and notification lines greppable.
"""

import logging
import sys
from typing import Any

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the application logger; safe to call again to change level."""
    app_logger = logging.getLogger("tireshop")
    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        app_logger.addHandler(handler)

    return app_logger


logger = setup_logging()


def get_logger(name: str) -> logging.Logger:
    """Child logger under the application logger (e.g. ``tireshop.quotes``)."""
    return logger.getChild(name.removeprefix("tireshop."))


def _fields(**kwargs: Any) -> str:
    return " ".join(f"{k}={v}" for k, v in kwargs.items() if v is not None)


def _line(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def log_request(method: str, path: str, **kwargs: Any) -> None:
    logger.info(_line("REQUEST", method, path, _fields(**kwargs)))


def log_response(method: str, path: str, status: int, duration_ms: float) -> None:
    logger.info(
        _line("RESPONSE", method, path, _fields(status=status, duration_ms=f"{duration_ms:.2f}"))
    )


def log_error(message: str, exc: Exception | None = None, **kwargs: Any) -> None:
    """Log an error; the traceback is attached when an exception is given."""
    logger.error(_line("ERROR", message, _fields(**kwargs)), exc_info=exc)


def log_db_query(operation: str, table: str, duration_ms: float | None = None) -> None:
    duration = f"{duration_ms:.2f}" if duration_ms else None
    logger.debug(_line("DB", operation, _fields(table=table, duration_ms=duration)))


def log_external_call(
    service: str, operation: str, success: bool, duration_ms: float | None = None
) -> None:
    duration = f"{duration_ms:.2f}" if duration_ms else None
    status = "success" if success else "failed"
    logger.info(
        _line("EXTERNAL", service, operation, _fields(status=status, duration_ms=duration))
    )


def log_notification(function: str, status_code: int, **kwargs: Any) -> None:
    """One line per notification function invocation."""
    level = logging.INFO if 200 <= status_code < 300 else logging.WARNING
    logger.log(level, _line("NOTIFY", function, _fields(status=status_code, **kwargs)))


def log_submission(kind: str, persisted: bool, notified: bool, **kwargs: Any) -> None:
    """Outcome of a write followed by a best-effort email."""
    logger.info(
        _line("SUBMIT", kind, _fields(persisted=persisted, notified=notified, **kwargs))
    )
