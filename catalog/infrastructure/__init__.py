"""
Infrastructure package for the book catalog.

Centralizes database connectivity concerns (DSN building, dedicated
connections, pooling). Keep this layer focused on I/O and resource
management, decoupled from the data handles.
"""

from catalog.infrastructure.db_factory import (
    build_dsn,
    get_sync_connection,
    open_pool,
    pool_session,
)

__all__ = [
    "build_dsn",
    "get_sync_connection",
    "open_pool",
    "pool_session",
]
