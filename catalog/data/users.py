"""
Data handle for the `users` table.
"""

from __future__ import annotations

from datetime import datetime, timezone

import psycopg
from psycopg_pool import ConnectionPool

from catalog.data.errors import DuplicateEmail, EditConflict, RecordNotFound
from catalog.domain.models import User, hash_token
from catalog.utils.logging import get_logger

log = get_logger(__name__)

EMAIL_CONSTRAINT = "users_email_key"

_COLUMNS = "users.id, users.created_at, users.name, users.email, users.password_hash, users.activated, users.version"

_INSERT_SQL = """
    INSERT INTO users (name, email, password_hash, activated)
    VALUES (%s, %s, %s, %s)
    RETURNING id, created_at, version
"""

_GET_BY_EMAIL_SQL = f"""
    SELECT {_COLUMNS}
    FROM users
    WHERE users.email = %s
"""

_UPDATE_SQL = """
    UPDATE users
    SET name = %s, email = %s, password_hash = %s, activated = %s, version = version + 1
    WHERE id = %s AND version = %s
    RETURNING version
"""

_GET_FOR_TOKEN_SQL = f"""
    SELECT {_COLUMNS}
    FROM users
    INNER JOIN tokens ON users.id = tokens.user_id
    WHERE tokens.hash = %s
    AND tokens.scope = %s
    AND tokens.expiry > %s
"""


def _is_duplicate_email(exc: psycopg.errors.UniqueViolation) -> bool:
    return exc.diag.constraint_name == EMAIL_CONSTRAINT


def _row_to_user(row: tuple) -> User:
    id_, created_at, name, email, password_hash, activated, version = row
    return User(
        id=id_,
        created_at=created_at,
        name=name,
        email=email,
        password_hash=bytes(password_hash),
        activated=activated,
        version=version,
    )


class UserModel:
    """CRUD access to the `users` table over a shared connection pool."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    def insert(self, user: User) -> None:
        """
        Insert a new user and fill in `id`, `created_at` and `version`.

        Raises
        ------
        DuplicateEmail
            If another user already has this email.
        """
        args = (user.name, user.email, user.password_hash, user.activated)
        try:
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(_INSERT_SQL, args)
                    user.id, user.created_at, user.version = cur.fetchone()
        except psycopg.errors.UniqueViolation as exc:
            if _is_duplicate_email(exc):
                raise DuplicateEmail() from exc
            raise
        log.debug("user inserted", extra={"user_id": user.id})

    def get_by_email(self, email: str) -> User:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_GET_BY_EMAIL_SQL, (email,))
                row = cur.fetchone()

        if row is None:
            log.debug("user not found", extra={"email": email})
            raise RecordNotFound()
        return _row_to_user(row)

    def update(self, user: User) -> None:
        """
        Write the user back and bump the version, guarded by `user.version`.

        Raises
        ------
        DuplicateEmail
            If the new email belongs to another user.
        EditConflict
            If the row changed since it was read, or no longer exists.
        """
        args = (
            user.name,
            user.email,
            user.password_hash,
            user.activated,
            user.id,
            user.version,
        )
        try:
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(_UPDATE_SQL, args)
                    row = cur.fetchone()
        except psycopg.errors.UniqueViolation as exc:
            if _is_duplicate_email(exc):
                raise DuplicateEmail() from exc
            raise

        if row is None:
            log.debug("user edit conflict", extra={"user_id": user.id, "version": user.version})
            raise EditConflict()

        user.version = row[0]

    def get_for_token(self, scope: str, plaintext: str) -> User:
        """
        Resolve the owner of an unexpired token in the given scope.

        Raises
        ------
        RecordNotFound
            If the token is unknown, expired, or belongs to a different scope.
        """
        args = (hash_token(plaintext), scope, datetime.now(timezone.utc))
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_GET_FOR_TOKEN_SQL, args)
                row = cur.fetchone()

        if row is None:
            log.debug("user not found for token", extra={"scope": scope})
            raise RecordNotFound()
        return _row_to_user(row)


__all__ = ["EMAIL_CONSTRAINT", "UserModel"]
