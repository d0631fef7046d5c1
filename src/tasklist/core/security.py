"""Password hashing and bearer-token primitives.

Access tokens are HS256 JWTs carrying ``sub`` (the user id), ``iat``, ``exp``
and a random ``jti``. Revocation is tracked by ``jti`` in process memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any
from uuid import uuid4

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from .config import Settings

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return password_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Return ``True`` when ``password`` matches; malformed hashes never match."""

    try:
        return password_context.verify(password, hashed_password)
    except ValueError:
        return False


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    jti: str
    issued_at: datetime
    expires_at: datetime


def issue_access_token(
    subject: str | int,
    settings: Settings,
    *,
    lifetime: timedelta | None = None,
) -> IssuedToken:
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + (lifetime or timedelta(minutes=settings.access_token_expire_minutes))
    jti = uuid4().hex
    claims: dict[str, Any] = {"sub": str(subject), "iat": issued_at, "exp": expires_at, "jti": jti}
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return IssuedToken(token=token, jti=jti, issued_at=issued_at, expires_at=expires_at)


def read_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify the signature and expiry of ``token`` and return its claims.

    Raises ``ExpiredSignatureError`` or ``JWTError`` from python-jose.
    """

    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


class RevokedTokenStore:
    """Token ids that must be refused until the token would have expired anyway."""

    def __init__(self) -> None:
        self._expiry_by_jti: dict[str, datetime] = {}
        self._lock = Lock()

    def revoke(self, jti: str, expires_at: datetime) -> None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        with self._lock:
            self._drop_expired()
            self._expiry_by_jti[jti] = expires_at

    def __contains__(self, jti: object) -> bool:
        with self._lock:
            self._drop_expired()
            return jti in self._expiry_by_jti

    def __len__(self) -> int:
        with self._lock:
            self._drop_expired()
            return len(self._expiry_by_jti)

    def clear(self) -> None:
        with self._lock:
            self._expiry_by_jti.clear()

    def _drop_expired(self) -> None:
        now = datetime.now(timezone.utc)
        for jti in [jti for jti, expiry in self._expiry_by_jti.items() if expiry <= now]:
            del self._expiry_by_jti[jti]


revoked_tokens = RevokedTokenStore()


__all__ = [
    "ExpiredSignatureError",
    "IssuedToken",
    "JWTError",
    "RevokedTokenStore",
    "hash_password",
    "issue_access_token",
    "password_context",
    "read_access_token",
    "revoked_tokens",
    "verify_password",
]
