"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings, get_settings
from .db.session import get_session
from .errors import AuthenticationError
from .models import User
from .schemas.auth import TokenPayload
from .services import AuthService

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from POST /api/login")


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with, falling back to the cached ones."""

    return getattr(request.app.state, "settings", None) or get_settings()


async def get_db_session() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]


def get_auth_service(session: DatabaseSessionDependency, settings: SettingsDependency) -> AuthService:
    return AuthService(session, settings)


AuthServiceDependency = Annotated[AuthService, Depends(get_auth_service)]
BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_token_payload(auth_service: AuthServiceDependency, credentials: BearerCredentials) -> TokenPayload:
    if credentials is None:
        raise AuthenticationError()
    return auth_service.decode_access_token(credentials.credentials)


TokenPayloadDependency = Annotated[TokenPayload, Depends(get_token_payload)]


async def get_current_user(
    auth_service: AuthServiceDependency,
    token_payload: TokenPayloadDependency,
) -> User:
    """Resolve the bearer token to a stored user; every task route depends on this."""

    return await auth_service.resolve_user(token_payload)


CurrentUserDependency = Annotated[User, Depends(get_current_user)]


__all__ = [
    "AuthServiceDependency",
    "CurrentUserDependency",
    "DatabaseSessionDependency",
    "SettingsDependency",
    "TokenPayloadDependency",
    "bearer_scheme",
    "get_app_settings",
    "get_auth_service",
    "get_current_user",
    "get_db_session",
    "get_token_payload",
]
