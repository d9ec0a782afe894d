"""
Pytest Configuration and Shared Fixtures

This module provides shared fixtures for all test suites:
- FakeSupabase: in-memory stand-in for the supabase-py query builder
- App / TestClient fixtures with the database dependency overridden
- Signed-in member and admin users
- Row factories live in factories.py

IMPORTANT: No real Supabase connections are made during tests.
"""

from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from factories import ADMIN_ID, MEMBER_ID, iso
from navcrypto.auth.session import CurrentUser, get_current_user, get_optional_user
from navcrypto.db.supabase_client import get_supabase, get_supabase_if_configured


# ============================================================================
# FAKE SUPABASE CLIENT
# ============================================================================

# Column defaults applied by the database on insert
TABLE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "profiles": {"plan": "free", "role": "user", "preferences": None},
    "signals": {"status": "draft", "profit_loss": None, "notes": None, "ai_generated": False},
    "content": {"status": "draft", "views": 0, "ai_generated": False, "published_at": None},
    "user_progress": {"completed": False, "completed_at": None},
    "ai_tasks": {"status": "pending", "result": None, "completed_at": None},
    "newsletter_subscribers": {"status": "active", "unsubscribed_at": None},
    "support_tickets": {"status": "open", "user_id": None},
}

UNIQUE_COLUMNS: Dict[str, str] = {
    "newsletter_subscribers": "email",
}


class FakeResponse:
    """Mimics postgrest's APIResponse (`.data` and `.count`)."""

    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None):
        self.data = data
        self.count = count


def _sort_value(value: Any):
    return (value is None, value if value is not None else 0)


class FakeQuery:
    """Chainable query over one in-memory table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self._op = "select"
        self._payload: Any = None
        self._count: Optional[str] = None
        self._filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._order: List[tuple] = []
        self._limit: Optional[int] = None
        self._range: Optional[tuple] = None

    # Operations -------------------------------------------------------------

    def select(self, columns: str = "*", count: Optional[str] = None) -> "FakeQuery":
        self._op = "select"
        self._count = count
        return self

    def insert(self, rows) -> "FakeQuery":
        self._op = "insert"
        self._payload = rows
        return self

    def update(self, values: Dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = values
        return self

    def upsert(self, rows) -> "FakeQuery":
        self._op = "upsert"
        self._payload = rows
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    # Filters ----------------------------------------------------------------

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values) -> "FakeQuery":
        allowed = list(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def _compare(self, column: str, test: Callable[[Any], bool]) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) is not None and test(row.get(column)))
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        return self._compare(column, lambda v: v >= value)

    def gt(self, column: str, value: Any) -> "FakeQuery":
        return self._compare(column, lambda v: v > value)

    def lt(self, column: str, value: Any) -> "FakeQuery":
        return self._compare(column, lambda v: v < value)

    def lte(self, column: str, value: Any) -> "FakeQuery":
        return self._compare(column, lambda v: v <= value)

    # Modifiers --------------------------------------------------------------

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order.append((column, desc))
        return self

    def limit(self, size: int) -> "FakeQuery":
        self._limit = size
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._range = (start, end)
        return self

    # Execution --------------------------------------------------------------

    def _matching(self) -> List[Dict[str, Any]]:
        rows = self.db.tables.setdefault(self.table_name, [])
        return [row for row in rows if all(f(row) for f in self._filters)]

    def _new_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        new = {**TABLE_DEFAULTS.get(self.table_name, {}), **deepcopy(row)}
        new.setdefault("id", str(uuid4()))
        new.setdefault("created_at", iso(datetime.now(timezone.utc)))
        if self.table_name == "newsletter_subscribers":
            new.setdefault("subscribed_at", new["created_at"])
        return new

    def _check_unique(self, row: Dict[str, Any]) -> None:
        column = UNIQUE_COLUMNS.get(self.table_name)
        if column is None:
            return
        if any(existing.get(column) == row.get(column) for existing in self.db.tables.get(self.table_name, [])):
            raise APIError({
                "code": "23505",
                "message": f'duplicate key value violates unique constraint "{self.table_name}_{column}_key"',
                "details": None,
                "hint": None,
            })

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table_name, self._op))
        error = self.db.errors.get((self.table_name, self._op)) or self.db.errors.get((self.table_name, "*"))
        if error is not None:
            raise error

        table = self.db.tables.setdefault(self.table_name, [])

        if self._op == "insert":
            rows = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for row in rows:
                new = self._new_row(row)
                self._check_unique(new)
                table.append(new)
                inserted.append(deepcopy(new))
            return FakeResponse(inserted)

        if self._op == "upsert":
            rows = self._payload if isinstance(self._payload, list) else [self._payload]
            saved = []
            for row in rows:
                existing = next((r for r in table if r.get("id") == row.get("id")), None)
                if existing is not None:
                    existing.update(deepcopy(row))
                    saved.append(deepcopy(existing))
                else:
                    new = self._new_row(row)
                    table.append(new)
                    saved.append(deepcopy(new))
            return FakeResponse(saved)

        matching = self._matching()

        if self._op == "update":
            for row in matching:
                row.update(deepcopy(self._payload))
            return FakeResponse([deepcopy(r) for r in matching])

        if self._op == "delete":
            self.db.tables[self.table_name] = [r for r in table if r not in matching]
            return FakeResponse([deepcopy(r) for r in matching])

        rows = list(matching)
        for column, desc in reversed(self._order):
            rows.sort(key=lambda r: _sort_value(r.get(column)), reverse=desc)
        count = len(rows) if self._count else None
        if self._range is not None:
            start, end = self._range
            rows = rows[start:end + 1]
        if self._limit is not None:
            rows = rows[:self._limit]
        return FakeResponse([deepcopy(r) for r in rows], count)


class FakeSupabase:
    """In-memory stand-in for supabase.Client.

    Usage:
        db = FakeSupabase()
        db.seed("signals", [{"pair": "BTC/USDT", ...}])
        db.fail("signals", "select")  # next selects raise
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.errors: Dict[tuple, Exception] = {}
        self.calls: List[tuple] = []
        self.auth = MagicMock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return FakeQuery(self, table).insert(rows).execute().data

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])

    def fail(self, table: str, op: str = "*", error: Optional[Exception] = None) -> None:
        self.errors[(table, op)] = error or RuntimeError(f"{table} {op} failed")


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def member() -> CurrentUser:
    return CurrentUser(
        id=MEMBER_ID,
        email="trader@example.com",
        full_name="Sam Trader",
        role="user",
        access_token="member-token",
    )


@pytest.fixture
def admin_user() -> CurrentUser:
    return CurrentUser(
        id=ADMIN_ID,
        email="admin@example.com",
        full_name="Alex Admin",
        role="admin",
        access_token="admin-token",
    )


# ============================================================================
# DATABASE / APP FIXTURES
# ============================================================================

@pytest.fixture
def fake_db() -> FakeSupabase:
    db = FakeSupabase()
    db.seed("profiles", [
        {"id": MEMBER_ID, "email": "trader@example.com", "full_name": "Sam Trader", "plan": "pro", "role": "user"},
        {"id": ADMIN_ID, "email": "admin@example.com", "full_name": "Alex Admin", "plan": "enterprise", "role": "admin"},
    ])
    return db


@pytest.fixture
def app(fake_db):
    """The FastAPI app with the Supabase dependency pointed at fake_db."""
    from navcrypto.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_supabase] = lambda: fake_db
    fastapi_app.dependency_overrides[get_supabase_if_configured] = lambda: fake_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous TestClient (no session)."""
    app.dependency_overrides[get_optional_user] = lambda: None
    return TestClient(app)


def _sign_in(app, user: CurrentUser) -> None:
    app.dependency_overrides[get_optional_user] = lambda: user
    app.dependency_overrides[get_current_user] = lambda: user


@pytest.fixture
def member_client(app, member) -> TestClient:
    """TestClient signed in as a regular member."""
    _sign_in(app, member)
    return TestClient(app)


@pytest.fixture
def admin_client(app, admin_user) -> TestClient:
    """TestClient signed in as an admin."""
    _sign_in(app, admin_user)
    return TestClient(app)
