"""
Domain package for the book catalog.

Exports the record types the data handles read and write. Keep this package
focused on data definitions and validation concerns.
"""

from catalog.domain.models import (
    ANONYMOUS_USER,
    SCOPE_ACTIVATION,
    SCOPE_AUTHENTICATION,
    Book,
    Token,
    User,
    hash_token,
)

__all__ = [
    "ANONYMOUS_USER",
    "Book",
    "SCOPE_ACTIVATION",
    "SCOPE_AUTHENTICATION",
    "Token",
    "User",
    "hash_token",
]
