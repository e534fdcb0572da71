"""Persistence for quotes, appointments and staff roles.

Thin wrappers over the Supabase table API: insert, select ordered newest
first, select by id, update by id. The client is synchronous, so quote and
appointment queries run in a worker thread. Any client-side or PostgREST
failure is raised as ``PersistenceError``.
"""

import asyncio
import time
from typing import Any

from supabase import Client

from tireshop.core.errors import NotFoundError, PersistenceError
from tireshop.core.logging import log_db_query, log_error
from tireshop.models.appointment import Appointment
from tireshop.models.quote import Quote

QUOTES_TABLE = "quotes"
APPOINTMENTS_TABLE = "appointments"
USER_ROLES_TABLE = "user_roles"


def _rows(result: Any) -> list[dict[str, Any]]:
    rows = result.data if result is not None else None
    if not isinstance(rows, list):
        return [rows] if isinstance(rows, dict) else []
    return [r for r in rows if isinstance(r, dict)]


def _execute_sync(operation: str, table: str, query: Any) -> list[dict[str, Any]]:
    start = time.time()
    try:
        result = query.execute()
    except Exception as e:
        log_error(f"DB {operation} failed", e, table=table)
        raise PersistenceError(operation, table, e) from e
    log_db_query(operation, table, (time.time() - start) * 1000)
    return _rows(result)


async def _execute(operation: str, table: str, query: Any) -> list[dict[str, Any]]:
    return await asyncio.to_thread(_execute_sync, operation, table, query)


class QuoteRepository:
    def __init__(self, client: Client) -> None:
        self.client = client

    async def insert(self, quote: Quote) -> Quote:
        rows = await _execute(
            "insert", QUOTES_TABLE, self.client.table(QUOTES_TABLE).insert(quote.to_row())
        )
        # Fall back to what we sent if the store returns no representation.
        return Quote.model_validate(rows[0]) if rows else quote

    async def list_all(self) -> list[Quote]:
        query = self.client.table(QUOTES_TABLE).select("*").order("created_at", desc=True)
        return [Quote.model_validate(r) for r in await _execute("select", QUOTES_TABLE, query)]

    async def get(self, quote_id: str) -> Quote:
        query = self.client.table(QUOTES_TABLE).select("*").eq("id", quote_id).limit(1)
        rows = await _execute("select", QUOTES_TABLE, query)
        if not rows:
            raise NotFoundError(f"Quote {quote_id} not found")
        return Quote.model_validate(rows[0])

    async def update(self, quote_id: str, changes: dict[str, Any]) -> Quote:
        query = self.client.table(QUOTES_TABLE).update(changes).eq("id", quote_id)
        rows = await _execute("update", QUOTES_TABLE, query)
        if not rows:
            raise NotFoundError(f"Quote {quote_id} not found")
        return Quote.model_validate(rows[0])


class AppointmentRepository:
    def __init__(self, client: Client) -> None:
        self.client = client

    async def insert(self, appointment: Appointment) -> Appointment:
        rows = await _execute(
            "insert",
            APPOINTMENTS_TABLE,
            self.client.table(APPOINTMENTS_TABLE).insert(appointment.to_row()),
        )
        return Appointment.model_validate(rows[0]) if rows else appointment

    async def list_all(self) -> list[Appointment]:
        query = (
            self.client.table(APPOINTMENTS_TABLE).select("*").order("created_at", desc=True)
        )
        rows = await _execute("select", APPOINTMENTS_TABLE, query)
        return [Appointment.model_validate(r) for r in rows]

    async def get(self, appointment_id: str) -> Appointment:
        query = (
            self.client.table(APPOINTMENTS_TABLE).select("*").eq("id", appointment_id).limit(1)
        )
        rows = await _execute("select", APPOINTMENTS_TABLE, query)
        if not rows:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return Appointment.model_validate(rows[0])

    async def update(self, appointment_id: str, changes: dict[str, Any]) -> Appointment:
        query = self.client.table(APPOINTMENTS_TABLE).update(changes).eq("id", appointment_id)
        rows = await _execute("update", APPOINTMENTS_TABLE, query)
        if not rows:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return Appointment.model_validate(rows[0])


class RoleRepository:
    """Role lookup for the admin gate; called from sync dependencies in the threadpool."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def roles_for(self, user_id: str) -> frozenset[str]:
        query = self.client.table(USER_ROLES_TABLE).select("role").eq("user_id", user_id)
        return frozenset(
            str(r["role"])
            for r in _execute_sync("select", USER_ROLES_TABLE, query)
            if r.get("role")
        )
