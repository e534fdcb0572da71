"""Shared fakes: an in-memory Supabase client, an email sender and NHTSA."""

import itertools
import os
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

os.environ.setdefault("ADMIN_EMAIL", "owner@example.com")
os.environ.setdefault("RESEND_API_KEY", "re_test")
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "service-role-key")

import pytest

from tireshop.core.errors import EmailDeliveryError, ProviderError
from tireshop.services.client_storage import ClientScope, ClientStorage
from tireshop.services.notifications import Notifier


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.row_limit: int | None = None

    def select(self, *_columns: str) -> "FakeQuery":
        self.operation = "select"
        return self

    def insert(self, row: dict[str, Any]) -> "FakeQuery":
        self.operation = "insert"
        self.payload = row
        return self

    def update(self, changes: dict[str, Any]) -> "FakeQuery":
        self.operation = "update"
        self.payload = changes
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.row_limit = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(str(row.get(c)) == str(v) for c, v in self.filters)

    def execute(self) -> SimpleNamespace:
        self.db.calls.append((self.operation, self.table))
        failure = self.db.failures.get((self.operation, self.table))
        if failure:
            raise failure.pop(0) if isinstance(failure, list) else failure

        rows = self.db.tables.setdefault(self.table, [])
        if self.operation == "insert":
            row = dict(self.payload)
            row.setdefault("id", f"{self.table}-{next(self.db.ids)}")
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        if self.operation == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        found = [dict(r) for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            found.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.row_limit is not None:
            found = found[: self.row_limit]
        return SimpleNamespace(data=found)


class FakeAuth:
    def __init__(self) -> None:
        # token -> user
        self.users: dict[str, SimpleNamespace] = {}
        self.passwords: dict[str, tuple[str, SimpleNamespace]] = {}
        self.signed_out: list[str] = []
        self.admin = SimpleNamespace(sign_out=self.signed_out.append)

    def add_user(self, token: str, user_id: str, email: str, password: str = "secret123"):
        user = SimpleNamespace(id=user_id, email=email)
        self.users[token] = user
        self.passwords[email] = (password, user)
        return user

    def get_user(self, token: str) -> SimpleNamespace:
        if token not in self.users:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=self.users[token])

    def sign_in_with_password(self, credentials: dict[str, str]) -> SimpleNamespace:
        password, user = self.passwords.get(credentials["email"], (None, None))
        if user is None or password != credentials["password"]:
            raise RuntimeError("Invalid login credentials")
        token = next(t for t, u in self.users.items() if u is user)
        session = SimpleNamespace(access_token=token, refresh_token="refresh")
        return SimpleNamespace(user=user, session=session)


class FakeSupabase:
    """Just enough of ``supabase.Client`` for the repositories and auth."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str]] = []
        self.ids = itertools.count(1)
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, operation: str, table: str, error: Exception | list[Exception]) -> None:
        self.failures[(operation, table)] = error

    def grant(self, user_id: str, role: str) -> None:
        self.tables.setdefault("user_roles", []).append({"user_id": user_id, "role": role})


class UniqueViolation(Exception):
    code = "23505"


# ---------------------------------------------------------------------------
# Email / NHTSA
# ---------------------------------------------------------------------------


class FakeSender:
    def __init__(self, fail: bool = False, fail_for: set[str] | None = None) -> None:
        self.fail = fail
        self.fail_for = fail_for or set()
        self.sent: list[dict[str, Any]] = []

    async def send(self, to, subject, html, reply_to=None):
        self.sent.append({"to": to, "subject": subject, "html": html, "reply_to": reply_to})
        if self.fail or set(to) & self.fail_for:
            raise EmailDeliveryError("Resend error 500: boom", status_code=500)
        return {"id": f"email-{len(self.sent)}"}

    async def close(self) -> None:
        pass


class FakeNHTSA:
    def __init__(self, makes=None, models=None, fail: bool = False) -> None:
        self.makes = makes or []
        self.models = models or []
        self.fail = fail
        self.calls: list[tuple[str, ...]] = []

    async def get_makes_for_year(self, year, vehicle_type="car"):
        self.calls.append(("makes", year))
        if self.fail:
            raise ProviderError("NHTSA get_makes_for_year failed: timeout")
        return [{"MakeName": m} for m in self.makes]

    async def get_models_for_make_year(self, make, year):
        self.calls.append(("models", make, year))
        if self.fail:
            raise ProviderError("NHTSA get_models_for_make_year failed: timeout")
        return [{"Model_Name": m} for m in self.models]

    async def close(self) -> None:
        pass


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def notifier(sender: FakeSender) -> Notifier:
    return Notifier(sender)


@pytest.fixture
def storage() -> ClientScope:
    return ClientScope(ClientStorage(), "client-1")
