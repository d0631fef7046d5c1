"""Registration, login and bearer-token workflows."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings
from ..core.security import (
    ExpiredSignatureError,
    IssuedToken,
    JWTError,
    issue_access_token,
    read_access_token,
    revoked_tokens,
    verify_password,
)
from ..errors import ApplicationError, AuthenticationError, ValidationError
from ..models import User
from ..schemas.auth import TokenPayload
from .users import UserService

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "The email has already been taken."
INVALID_TOKEN_MESSAGE = "Could not validate credentials."


class AuthService:
    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._settings = settings
        self._users = UserService(session)

    async def register_user(self, *, name: str, email: str, password: str) -> User:
        """Create an account; an email that is already registered is a field error."""
        if await self._users.get_user_by_email(email) is not None:
            raise ValidationError(errors={"email": [EMAIL_TAKEN_MESSAGE]})
        user = await self._users.create_user(name=name, email=email, password=password)
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def authenticate_user(self, email: str, password: str) -> User | None:
        """Return the user for a correct email/password pair, else ``None``."""
        user = await self._users.get_user_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Login rejected")
            return None
        return user

    def issue_token(self, user: User) -> IssuedToken:
        if user.id is None:
            raise ApplicationError("User must be persisted before issuing tokens.")
        return issue_access_token(user.id, self._settings)

    def decode_access_token(self, token: str) -> TokenPayload:
        """Verify signature, expiry and revocation of a bearer token.

        Every failure is an ``AuthenticationError`` so callers answer 401.
        """
        try:
            claims = read_access_token(token, self._settings)
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired.") from exc
        except JWTError as exc:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE) from exc

        try:
            payload = TokenPayload.model_validate(claims)
        except PydanticValidationError as exc:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE) from exc

        if payload.jti in revoked_tokens:
            raise AuthenticationError("Token has been revoked.")
        return payload

    async def resolve_user(self, payload: TokenPayload) -> User:
        if not payload.sub.isdigit():
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)
        user = await self._users.get_user(int(payload.sub))
        if user is None:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)
        return user

    def revoke(self, payload: TokenPayload) -> None:
        revoked_tokens.revoke(payload.jti, payload.exp)
        logger.info("Token revoked", extra={"user_id": payload.sub})

    def refresh(self, user: User, payload: TokenPayload) -> IssuedToken:
        """Revoke the presented token and hand out a fresh one for the same user."""
        self.revoke(payload)
        return self.issue_token(user)


__all__ = ["AuthService", "EMAIL_TAKEN_MESSAGE"]
