import os

# Set environment BEFORE importing any app modules.
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["APP_ENV"] = "development"
os.environ.pop("DATABASE_URL", None)

import pytest
from fastapi.testclient import TestClient

from core import db


class FakeTransaction:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn

    async def __aenter__(self):
        self.conn.transactions_started += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.conn.committed += 1
        else:
            self.conn.rolled_back += 1
        return False


class FakeConnection:
    """
    Records statements instead of talking to Postgres.

    `fail_on` makes any statement containing that text raise, which is how
    tests simulate a failing child insert inside a transaction.
    """

    def __init__(self):
        self.statements: list[tuple[str, str, tuple]] = []
        self.fetchrow_result: dict | None = {"id": 42}
        self.fail_on: str | None = None
        self.transactions_started = 0
        self.committed = 0
        self.rolled_back = 0

    def _record(self, kind: str, sql: str, args: tuple) -> None:
        normalized = " ".join(sql.split())
        if self.fail_on and self.fail_on in normalized:
            raise RuntimeError(f"statement failed: {self.fail_on}")
        self.statements.append((kind, normalized, args))

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self)

    async def fetchrow(self, sql: str, *args):
        self._record("fetchrow", sql, args)
        return self.fetchrow_result

    async def fetch(self, sql: str, *args):
        self._record("fetch", sql, args)
        return []

    async def execute(self, sql: str, *args):
        self._record("execute", sql, args)
        return "OK"

    async def executemany(self, sql: str, records):
        self._record("executemany", sql, (list(records),))

    def sql(self) -> list[str]:
        return [statement for _, statement, _ in self.statements]


class _Acquire:
    def __init__(self, pool: "FakePool"):
        self.pool = pool

    async def __aenter__(self):
        self.pool.acquired += 1
        return self.pool.conn

    async def __aexit__(self, exc_type, exc, tb):
        self.pool.released += 1
        return False


class FakePool:
    def __init__(self):
        self.conn = FakeConnection()
        self.acquired = 0
        self.released = 0
        self.fetchrow_result: dict | None = None
        self.fetch_result: list[dict] = []

    def acquire(self) -> _Acquire:
        return _Acquire(self)

    async def fetchrow(self, sql: str, *args):
        self.conn._record("fetchrow", sql, args)
        return self.fetchrow_result

    async def fetch(self, sql: str, *args):
        self.conn._record("fetch", sql, args)
        return self.fetch_result


@pytest.fixture
def fake_pool(monkeypatch):
    """Install a FakePool as the module-level asyncpg pool."""
    pool = FakePool()
    monkeypatch.setattr(db, "_pool", pool)
    return pool


@pytest.fixture
def fake_conn(fake_pool):
    return fake_pool.conn


@pytest.fixture
def client():
    """Test client without lifespan, so no database is opened."""
    from main import app

    return TestClient(app)
