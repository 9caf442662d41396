"""
Model registry: one data handle per table, all sharing one pool.

Build it once at startup and pass it to whatever layer needs data access:

    with pool_session() as pool:
        models = new_models(pool)
        book = models.books.get(1)
"""

from __future__ import annotations

from dataclasses import dataclass

from psycopg_pool import ConnectionPool

from catalog.data.books import BookModel
from catalog.data.tokens import TokenModel
from catalog.data.users import UserModel


@dataclass(frozen=True)
class Models:
    """Container for the data handles. Owns no data itself."""

    books: BookModel
    users: UserModel
    tokens: TokenModel


def new_models(pool: ConnectionPool) -> Models:
    return Models(
        books=BookModel(pool),
        users=UserModel(pool),
        tokens=TokenModel(pool),
    )


__all__ = ["Models", "new_models"]
