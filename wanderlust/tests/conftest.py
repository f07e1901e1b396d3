from __future__ import annotations

import copy
import itertools
import os
import re

import pytest

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

_OR_ILIKE_RE = re.compile(r'(\w+)\.ilike\."((?:[^"\\]|\\.)*)"')


class FakeResponse:
    def __init__(self, data):
        self.data = data


def _like_term(pattern: str) -> str:
    return pattern.strip("%").lower()


class FakeTableQuery:
    _ids = itertools.count(1)

    def __init__(self, table_name: str, storage: dict[str, list[dict]]):
        self.table_name = table_name
        self.storage = storage
        self.filters: list = []
        self.order_by: tuple[str, bool] | None = None
        self.limit_value: int | None = None
        self.operation = "select"
        self.payload = None
        self.on_conflict: str | None = None

    def select(self, *_args, **_kwargs):
        return self

    def eq(self, field, value):
        self.filters.append(lambda row: row.get(field) == value)
        return self

    def neq(self, field, value):
        self.filters.append(lambda row: row.get(field) != value)
        return self

    def in_(self, field, values):
        accepted = set(values)
        self.filters.append(lambda row: row.get(field) in accepted)
        return self

    def lt(self, field, value):
        self.filters.append(lambda row: row.get(field) is not None and row.get(field) < value)
        return self

    def gte(self, field, value):
        self.filters.append(lambda row: row.get(field) is not None and row.get(field) >= value)
        return self

    def lte(self, field, value):
        self.filters.append(lambda row: row.get(field) is not None and row.get(field) <= value)
        return self

    def ilike(self, field, pattern):
        term = _like_term(pattern)
        self.filters.append(lambda row: term in str(row.get(field) or "").lower())
        return self

    def or_(self, clause: str):
        terms = [
            (field, _like_term(value.replace('\\"', '"').replace("\\\\", "\\")))
            for field, value in _OR_ILIKE_RE.findall(clause)
        ]
        self.filters.append(
            lambda row: any(term in str(row.get(field) or "").lower() for field, term in terms)
        )
        return self

    def contains(self, field, values):
        self.filters.append(lambda row: all(v in (row.get(field) or []) for v in values))
        return self

    def order(self, field, desc: bool = False):
        self.order_by = (field, desc)
        return self

    def limit(self, value: int):
        self.limit_value = value
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict: str = "id"):
        self.operation = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def _matches(self, row: dict) -> bool:
        return all(predicate(row) for predicate in self.filters)

    def _with_id(self, row: dict) -> dict:
        stored = copy.deepcopy(row)
        stored.setdefault("id", f"{self.table_name}-{next(self._ids)}")
        return stored

    def execute(self):
        target = self.storage.setdefault(self.table_name, [])

        if self.operation == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            stored = [self._with_id(row) for row in rows]
            target.extend(stored)
            return FakeResponse(copy.deepcopy(stored))

        if self.operation == "upsert":
            key = self.on_conflict
            for index, row in enumerate(target):
                if row.get(key) == self.payload.get(key):
                    target[index] = {**row, **copy.deepcopy(self.payload)}
                    return FakeResponse([copy.deepcopy(target[index])])
            stored = self._with_id(self.payload)
            target.append(stored)
            return FakeResponse([copy.deepcopy(stored)])

        if self.operation == "update":
            updated = []
            for row in target:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    updated.append(copy.deepcopy(row))
            return FakeResponse(updated)

        if self.operation == "delete":
            removed = [row for row in target if self._matches(row)]
            self.storage[self.table_name] = [row for row in target if not self._matches(row)]
            return FakeResponse(copy.deepcopy(removed))

        rows = [copy.deepcopy(row) for row in target if self._matches(row)]
        if self.order_by is not None:
            field, desc = self.order_by
            rows.sort(
                key=lambda row: (row.get(field) is None, row.get(field) if row.get(field) is not None else 0),
                reverse=desc,
            )
        if self.limit_value is not None:
            rows = rows[: self.limit_value]
        return FakeResponse(rows)


class FakeSupabaseClient:
    def __init__(self, storage: dict[str, list[dict]]):
        self.storage = storage

    def table(self, table_name: str):
        return FakeTableQuery(table_name, self.storage)


class FailingSupabaseClient:
    """Every table access blows up, like a dropped connection."""

    def __init__(self, failing_tables: set[str] | None = None, storage=None):
        self.failing_tables = failing_tables
        self.fallback = FakeSupabaseClient(storage if storage is not None else {})

    def table(self, table_name: str):
        if self.failing_tables is None or table_name in self.failing_tables:
            raise RuntimeError(f"connection to {table_name} lost")
        return self.fallback.table(table_name)


@pytest.fixture
def storage() -> dict[str, list[dict]]:
    return {}


@pytest.fixture
def fake_client(storage) -> FakeSupabaseClient:
    return FakeSupabaseClient(storage)


@pytest.fixture
def failing_client_factory():
    return FailingSupabaseClient
