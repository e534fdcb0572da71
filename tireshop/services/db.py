"""Supabase clients for the repositories, role lookups and staff sign-in."""

import threading

from supabase import Client, create_client

from tireshop.config import get_settings
from tireshop.core.errors import PersistenceError
from tireshop.core.logging import get_logger

logger = get_logger(__name__)

_supabase: Client | None = None
_client_lock = threading.Lock()


def new_supabase_client() -> Client:
    """Build an unshared client; sign-in uses one per request."""
    settings = get_settings()
    if not (settings.supabase_url and settings.supabase_key):
        raise PersistenceError("connect", "supabase")
    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client() -> Client:
    """The process-wide client, created on first use."""
    global _supabase
    if _supabase is None:
        with _client_lock:
            if _supabase is None:
                _supabase = new_supabase_client()
                logger.info("Supabase client created")
    return _supabase
