"""
Sentinel exceptions raised by the data handles.

Callers branch on these to produce domain responses (e.g. "not found");
every other error surfaces as the underlying `psycopg.Error`, unwrapped.
"""

from __future__ import annotations


class DataError(Exception):
    """Base class for data-layer sentinel errors."""


class RecordNotFound(DataError):
    """Raised when a lookup or delete targets a row that does not exist."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


class EditConflict(DataError):
    """Raised when a version-checked update matches no row."""

    def __init__(self, message: str = "edit conflict") -> None:
        super().__init__(message)


class DuplicateEmail(DataError):
    """Raised when a user insert or update collides on the unique email."""

    def __init__(self, message: str = "duplicate email") -> None:
        super().__init__(message)


__all__ = [
    "DataError",
    "DuplicateEmail",
    "EditConflict",
    "RecordNotFound",
]
