"""
Shared fixtures: an in-memory stand-in for the Supabase client used by the
stores (query builder + auth), and settings for a test environment.
"""

import copy
import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("NOTIFICATION_PLATFORM", "web")
os.environ.setdefault("LLM_API_KEY", "")

from rememberly.config import get_settings  # noqa: E402

get_settings.cache_clear()

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeQuery:
    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters: list[tuple[str, object]] = []
        self.order_by: tuple[str, bool] | None = None

    def select(self, columns: str = "*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def _matching(self) -> list[dict]:
        rows = self.client.tables.setdefault(self.table, [])
        return [r for r in rows if all(r.get(c) == v for c, v in self.filters)]

    def execute(self):
        self.client.calls.append((self.table, self.op, self.payload, list(self.filters)))
        if self.client.before_execute:
            self.client.before_execute(self)
        failure = self.client.failures.get((self.table, self.op))
        if failure is not None:
            raise failure

        rows = self.client.tables.setdefault(self.table, [])
        if self.op == "select":
            data = self._matching()
            if self.order_by:
                column, desc = self.order_by
                data = sorted(data, key=lambda r: r[column], reverse=desc)
        elif self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            data = []
            for item in items:
                row = {**item, "id": item.get("id") or str(uuid.uuid4())}
                stamp = self.client.next_timestamp()
                row.setdefault("created_at", stamp)
                if self.table == "notes":
                    row.setdefault("updated_at", stamp)
                rows.append(row)
                data.append(row)
        elif self.op == "update":
            data = self._matching()
            for row in data:
                row.update(self.payload)
        else:
            data = self._matching()
            self.client.tables[self.table] = [r for r in rows if r not in data]
        return SimpleNamespace(data=copy.deepcopy(data))


class FakeAuth:
    def __init__(self, user=None, access_token: str = "token-1"):
        self.user = user
        self.access_token = access_token
        self.failure: Exception | None = None
        self.accounts: dict[str, str] = {}

    def get_user(self, jwt=None):
        if self.failure is not None:
            raise self.failure
        return SimpleNamespace(user=self.user) if self.user else None

    def _response(self, email: str):
        self.user = SimpleNamespace(id=f"user-{email}", email=email)
        expires_at = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())
        session = SimpleNamespace(access_token=f"token-{email}", expires_at=expires_at, expires_in=3600)
        return SimpleNamespace(user=self.user, session=session)

    def sign_in_with_password(self, credentials: dict):
        if self.failure is not None:
            raise self.failure
        if self.accounts.get(credentials["email"]) != credentials["password"]:
            raise Exception("Invalid login credentials")
        return self._response(credentials["email"])

    def sign_up(self, credentials: dict):
        if self.failure is not None:
            raise self.failure
        self.accounts[credentials["email"]] = credentials["password"]
        return self._response(credentials["email"])

    def sign_out(self):
        self.user = None


class FakeSupabase:
    """Just enough of supabase.Client for the stores and auth service."""

    def __init__(self, user_id: str | None = "user-1"):
        self.tables: dict[str, list[dict]] = {"notes": [], "reminders": []}
        self.failures: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple] = []
        self.before_execute = None
        user = SimpleNamespace(id=user_id, email="me@example.com") if user_id else None
        self.auth = FakeAuth(user)
        self._ticks = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_timestamp(self) -> str:
        self._ticks += 1
        return (BASE_TIME + timedelta(seconds=self._ticks)).isoformat()

    def fail(self, table: str, op: str, error: Exception) -> None:
        self.failures[(table, op)] = error

    def recover(self) -> None:
        self.failures.clear()


def note_row(user_id: str = "user-1", created_at: datetime = BASE_TIME, **overrides) -> dict:
    row = {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "title": "A note",
        "original_content": "Some content",
        "summary": "Some content",
        "type": "text",
        "tags": [],
        "source_url": None,
        "file_url": None,
        "created_at": created_at.isoformat(),
        "updated_at": created_at.isoformat(),
    }
    row.update(overrides)
    return row


def reminder_row(remind_at: datetime, user_id: str = "user-1", **overrides) -> dict:
    row = {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "note_id": None,
        "title": "Call mom",
        "description": "",
        "remind_at": remind_at.isoformat(),
        "priority": "medium",
        "is_completed": False,
        "notification_id": None,
        "natural_input": "",
        "created_at": BASE_TIME.isoformat(),
    }
    row.update(overrides)
    return row


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def anonymous_db() -> FakeSupabase:
    return FakeSupabase(user_id=None)
