"""
Pytest configuration for the book catalog.

Provides fixtures for:
- An in-memory fake pool that records statements (unit tests)
- Database connection management and schema setup (integration tests)
- A real connection pool and model registry over it
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from catalog.config import Settings
from catalog.data import Models, new_models
from catalog.infrastructure.db_factory import build_dsn

INIT_SQL_PATH = Path(__file__).parent.parent / "db" / "init.sql"


class FakeCursor:
    """Cursor double: records each execute and replays the next queued result."""

    def __init__(self, pool: "FakePool") -> None:
        self._pool = pool
        self._row: Any = None
        self.rowcount = -1

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, sql: str, params: Any = None) -> None:
        self._pool.statements.append((" ".join(sql.split()), params))
        outcome = self._pool.results.pop(0) if self._pool.results else {}
        if isinstance(outcome, BaseException):
            raise outcome
        self._row = outcome.get("row")
        self.rowcount = outcome.get("rowcount", 1 if self._row is not None else 0)

    def fetchone(self) -> Any:
        row, self._row = self._row, None
        return row


class FakeConnection:
    def __init__(self, pool: "FakePool") -> None:
        self._pool = pool

    def cursor(self) -> FakeCursor:
        return FakeCursor(self._pool)


class FakePool:
    """
    Stand-in for `psycopg_pool.ConnectionPool`.

    Queue results with `push(row=..., rowcount=...)` or `push_error(exc)`;
    inspect `statements`, `commits` and `rollbacks` afterwards.
    """

    def __init__(self) -> None:
        self.results: list[Any] = []
        self.statements: list[tuple[str, Any]] = []
        self.commits = 0
        self.rollbacks = 0

    def push(self, row: Any = None, rowcount: int | None = None) -> None:
        outcome: dict[str, Any] = {"row": row}
        if rowcount is not None:
            outcome["rowcount"] = rowcount
        self.results.append(outcome)

    def push_error(self, exc: BaseException) -> None:
        self.results.append(exc)

    @contextmanager
    def connection(self) -> Iterator[FakeConnection]:
        try:
            yield FakeConnection(self)
        except BaseException:
            self.rollbacks += 1
            raise
        else:
            self.commits += 1


@pytest.fixture()
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture()
def fake_models(fake_pool: FakePool) -> Models:
    return new_models(fake_pool)  # type: ignore[arg-type]


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "catalog"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for setup and cleanup.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """Apply db/init.sql; every statement in it is idempotent."""
    with db_connection.cursor() as cur:
        cur.execute(INIT_SQL_PATH.read_text(encoding="utf-8"))
    db_connection.commit()
    return True


@pytest.fixture(scope="session")
def db_pool(test_dsn: str, db_schema_initialized: bool) -> Generator[ConnectionPool, None, None]:
    pool = ConnectionPool(conninfo=test_dsn, min_size=1, max_size=4, open=True)
    try:
        yield pool
    finally:
        pool.close()


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty all catalog tables before and after each test function.
    """
    truncate = "TRUNCATE TABLE public.tokens, public.users, public.books RESTART IDENTITY CASCADE;"
    with db_connection.cursor() as cur:
        cur.execute(truncate)
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute(truncate)
    db_connection.commit()


@pytest.fixture()
def models(db_pool: ConnectionPool, clean_tables) -> Models:
    return new_models(db_pool)
