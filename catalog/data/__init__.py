"""
Data-access package for the book catalog.

Re-exports the model registry, the per-table handles, and the sentinel
errors so callers can import from `catalog.data` directly.
"""

from catalog.data.books import BookModel
from catalog.data.errors import DataError, DuplicateEmail, EditConflict, RecordNotFound
from catalog.data.models import Models, new_models
from catalog.data.tokens import TokenModel
from catalog.data.users import UserModel

__all__ = [
    # Registry
    "Models",
    "new_models",
    # Handles
    "BookModel",
    "TokenModel",
    "UserModel",
    # Errors
    "DataError",
    "DuplicateEmail",
    "EditConflict",
    "RecordNotFound",
]
