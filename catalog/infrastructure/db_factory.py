"""
Database connection factory utilities for the book catalog.

Builds DSNs from settings, opens dedicated psycopg connections, and creates
the synchronous connection pool that is handed to the model registry. The
pool is returned to the caller rather than cached here; whoever opens it owns
its lifecycle.

Connection acquisition retries transient failures using tenacity. Statements
executed through the data handles are never retried.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from catalog.config import Settings, get_settings
from catalog.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a libpq URL from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.
    Use this for one-off work such as schema setup or seeding. Prefer the pool
    for anything routed through the model registry.

    Parameters
    ----------
    dsn : str, optional
        Connection string; defaults to one built from settings.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


def open_pool(
    dsn: Optional[str] = None,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> ConnectionPool:
    """
    Open a synchronous connection pool.

    Parameters
    ----------
    dsn : str, optional
        Connection string; defaults to one built from settings.
    min_size : int, optional
        Minimum number of idle connections to keep. Defaults to DB_POOL_MIN_SIZE.
    max_size : int, optional
        Maximum total connections in the pool. Defaults to DB_POOL_MAX_SIZE.

    Returns
    -------
    ConnectionPool
        An opened pool. The caller is responsible for closing it.
    """
    settings = get_settings()
    min_size = min_size if min_size is not None else settings.db_pool_min_size
    max_size = max_size if max_size is not None else settings.db_pool_max_size
    log.debug("opening connection pool", extra={"min_size": min_size, "max_size": max_size})
    return ConnectionPool(
        conninfo=dsn or build_dsn(settings),
        min_size=min_size,
        max_size=max_size,
        open=True,
    )


@contextmanager
def pool_session(
    dsn: Optional[str] = None,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> Generator[ConnectionPool, None, None]:
    """
    Context manager that opens a pool and closes it on exit.

    Example
    -------
        with pool_session() as pool:
            models = new_models(pool)
            book = models.books.get(1)
    """
    pool = open_pool(dsn=dsn, min_size=min_size, max_size=max_size)
    try:
        yield pool
    finally:
        pool.close()


__all__ = [
    "build_dsn",
    "get_sync_connection",
    "open_pool",
    "pool_session",
]
