"""
Book catalog - data-access layer for books, users, and tokens on PostgreSQL.

Each table is wrapped by a handle exposing a few CRUD operations, each one a
single parameterized statement over a shared psycopg connection pool. The
handles are grouped in a registry that callers construct once and inject:

- `new_models(pool)` builds the registry (`books`, `users`, `tokens`)
- `RecordNotFound` and `EditConflict` are the sentinel errors callers branch on
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from catalog.config import Settings, get_settings
from catalog.data import (
    BookModel,
    DataError,
    DuplicateEmail,
    EditConflict,
    Models,
    RecordNotFound,
    TokenModel,
    UserModel,
    new_models,
)
from catalog.domain.models import Book, Token, User
from catalog.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Registry and handles
    "Models",
    "new_models",
    "BookModel",
    "UserModel",
    "TokenModel",
    # Records
    "Book",
    "User",
    "Token",
    # Errors
    "DataError",
    "RecordNotFound",
    "EditConflict",
    "DuplicateEmail",
    # Logging
    "configure_logging",
    "get_logger",
]
