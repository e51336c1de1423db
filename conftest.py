"""Shared fixtures: in-memory Supabase and model clients injected into the app."""
import itertools
import json
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from config import Settings
from db.client import get_settings, get_supabase
from main import app
from services.llm_client import get_llm_client

USER_ID = "user-1"
OTHER_ID = "user-2"
TOKENS = {"token-1": USER_ID, "token-2": OTHER_ID}

_clock = itertools.count()


def _timestamp() -> str:
    return (datetime(2024, 1, 1) + timedelta(seconds=next(_clock))).isoformat()


class FakeQuery:
    """Enough of the PostgREST query builder for the routes under test."""

    def __init__(self, store: List[Dict[str, Any]]):
        self.store = store
        self.filters = []
        self.action = "select"
        self.payload: Any = None
        self.order_by: Optional[tuple] = None
        self.max_rows: Optional[int] = None

    def select(self, *_columns, **_kwargs):
        self.action = "select"
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matching(self):
        return [row for row in self.store if all(f(row) for f in self.filters)]

    def execute(self):
        if self.action == "insert":
            row = {"id": str(uuid4()), "created_at": _timestamp(), **self.payload}
            self.store.append(row)
            return SimpleNamespace(data=[dict(row)])

        rows = self._matching()

        if self.action == "update":
            for row in rows:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in rows])

        if self.action == "delete":
            for row in rows:
                self.store.remove(row)
            return SimpleNamespace(data=[dict(r) for r in rows])

        if self.order_by:
            column, desc = self.order_by
            rows = sorted(rows, key=lambda r: r.get(column) or "", reverse=desc)
        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        return SimpleNamespace(data=[dict(r) for r in rows])


class FakeBucket:
    def __init__(self, objects: Dict[str, bytes]):
        self.objects = objects

    def upload(self, path, file, file_options=None):
        self.objects[path] = file
        return SimpleNamespace(path=path)

    def download(self, path):
        if path not in self.objects:
            raise RuntimeError(f"Object not found: {path}")
        return self.objects[path]


class FakeStorage:
    def __init__(self):
        self.buckets: Dict[str, Dict[str, bytes]] = {}

    def from_(self, bucket):
        return FakeBucket(self.buckets.setdefault(bucket, {}))


class FakeAuth:
    def get_user(self, token):
        if token not in TOKENS:
            raise RuntimeError("invalid JWT")
        user_id = TOKENS[token]
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=f"{user_id}@example.com"))


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self.tables.setdefault(name, []))

    def seed(self, name, **row):
        return self.table(name).insert(row).execute().data[0]


class FakeLLM:
    """Records calls and returns queued replies."""

    def __init__(self):
        self.replies: List[str] = []
        self.calls: List[Dict[str, Any]] = []

    def queue(self, reply):
        self.replies.append(reply if isinstance(reply, str) else json.dumps(reply))

    async def chat_completions(self, messages, temperature=0.7, max_tokens=None, json_mode=False):
        self.calls.append({"messages": messages, "temperature": temperature, "json_mode": json_mode})
        return self.replies.pop(0) if self.replies else ""


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def settings():
    return Settings(openai_api_key="test-key", resend_api_key=None)


@pytest.fixture
def client(fake_supabase, fake_llm, settings):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer token-1"}
