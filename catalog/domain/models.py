"""
Domain models for the book catalog.

Defines the record schemas aligned with `db/init.sql`. The data handles fill
these in place from `RETURNING` clauses, so unlike value objects they are left
mutable.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

SCOPE_ACTIVATION = "activation"
SCOPE_AUTHENTICATION = "authentication"

_SCRYPT_SALT_BYTES = 16
_SCRYPT_PARAMS = {"n": 2**14, "r": 8, "p": 1, "dklen": 32}


class Book(BaseModel):
    """
    Representation of a single row in the `books` table.
    """

    id: int = Field(0, description="Primary key (BIGSERIAL); assigned on insert.")
    created_at: Optional[datetime] = Field(None, description="Row creation timestamp.")
    title: str = Field(..., description="Book title.")
    year: int = Field(0, description="Release year; 0 when unknown.")
    cost: int = Field(0, description="Cost; 0 when unknown.")
    genres: List[str] = Field(default_factory=list, description="Ordered genre tags.")
    version: int = Field(0, description="Optimistic-concurrency counter; 1 on insert.")
    amount: int = Field(0, description="Auxiliary quantity; not persisted.")

    def to_envelope(self) -> Dict[str, Any]:
        """
        Render the book the way the HTTP layer exposes it.

        `created_at` is hidden, empty `year`/`cost`/`genres` are omitted, and
        `cost` travels as a numeric string under the `runtime` key.
        """
        payload: Dict[str, Any] = {"id": self.id, "title": self.title}
        if self.year:
            payload["year"] = self.year
        if self.cost:
            payload["runtime"] = str(self.cost)
        if self.genres:
            payload["genres"] = list(self.genres)
        payload["version"] = self.version
        payload["amount"] = self.amount
        return payload


class User(BaseModel):
    """
    Representation of a single row in the `users` table.
    """

    id: int = Field(0, description="Primary key (BIGSERIAL); assigned on insert.")
    created_at: Optional[datetime] = Field(None, description="Row creation timestamp.")
    name: str = Field("", description="Display name.")
    email: str = Field("", description="Unique (case-insensitive) email address.")
    password_hash: bytes = Field(b"", description="Salt followed by the scrypt digest.")
    activated: bool = Field(False, description="Whether the account has been activated.")
    version: int = Field(0, description="Optimistic-concurrency counter; 1 on insert.")

    @property
    def is_anonymous(self) -> bool:
        return self is ANONYMOUS_USER

    def set_password(self, plaintext: str) -> None:
        salt = secrets.token_bytes(_SCRYPT_SALT_BYTES)
        digest = hashlib.scrypt(plaintext.encode("utf-8"), salt=salt, **_SCRYPT_PARAMS)
        self.password_hash = salt + digest

    def password_matches(self, plaintext: str) -> bool:
        if len(self.password_hash) <= _SCRYPT_SALT_BYTES:
            return False
        salt = self.password_hash[:_SCRYPT_SALT_BYTES]
        expected = self.password_hash[_SCRYPT_SALT_BYTES:]
        digest = hashlib.scrypt(plaintext.encode("utf-8"), salt=salt, **_SCRYPT_PARAMS)
        return hmac.compare_digest(digest, expected)


ANONYMOUS_USER = User()


def hash_token(plaintext: str) -> bytes:
    """SHA-256 digest of a token's plaintext, as stored in `tokens.hash`."""
    return hashlib.sha256(plaintext.encode("utf-8")).digest()


class Token(BaseModel):
    """
    Representation of a single row in the `tokens` table plus its plaintext.

    Only `hash` is persisted; `plaintext` is handed to the user once.
    """

    plaintext: str = Field("", description="Base32 token text; never stored.")
    hash: bytes = Field(b"", description="SHA-256 of the plaintext.")
    user_id: int = Field(..., description="Owning user id.")
    expiry: datetime = Field(..., description="Expiry timestamp (UTC).")
    scope: str = Field(..., description="Token scope, e.g. 'activation'.")

    @classmethod
    def generate(cls, user_id: int, ttl: timedelta, scope: str) -> "Token":
        # 16 random bytes base32-encode to 26 characters once padding is dropped.
        plaintext = base64.b32encode(secrets.token_bytes(16)).decode("ascii").rstrip("=")
        return cls(
            plaintext=plaintext,
            hash=hash_token(plaintext),
            user_id=user_id,
            expiry=datetime.now(timezone.utc) + ttl,
            scope=scope,
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
