"""
Data handle for the `tokens` table.

Tokens are stored by the SHA-256 of their plaintext only; the plaintext
exists solely on the `Token` returned by `new`.
"""

from __future__ import annotations

from datetime import timedelta

from psycopg_pool import ConnectionPool

from catalog.domain.models import Token
from catalog.utils.logging import get_logger

log = get_logger(__name__)

_INSERT_SQL = """
    INSERT INTO tokens (hash, user_id, expiry, scope)
    VALUES (%s, %s, %s, %s)
"""

_DELETE_ALL_FOR_USER_SQL = """
    DELETE FROM tokens
    WHERE scope = %s AND user_id = %s
"""


class TokenModel:
    """Access to the `tokens` table over a shared connection pool."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    def new(self, user_id: int, ttl: timedelta, scope: str) -> Token:
        """Generate a token for `user_id`, persist it, and return it with its plaintext."""
        token = Token.generate(user_id, ttl, scope)
        self.insert(token)
        return token

    def insert(self, token: Token) -> None:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_INSERT_SQL, (token.hash, token.user_id, token.expiry, token.scope))
        log.debug("token inserted", extra={"user_id": token.user_id, "scope": token.scope})

    def delete_all_for_user(self, scope: str, user_id: int) -> None:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_DELETE_ALL_FOR_USER_SQL, (scope, user_id))
                deleted = cur.rowcount
        log.debug("tokens deleted", extra={"user_id": user_id, "scope": scope, "rows": deleted})


__all__ = ["TokenModel"]
