"""Routes handling user registration and bearer-token flows."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...core.security import IssuedToken
from ...deps import AuthServiceDependency, CurrentUserDependency, TokenPayloadDependency
from ...errors import AuthenticationError
from ...models import User
from ...schemas import Envelope, LoginRequest, RegisterRequest, TokenData, UserData, UserPublic

router = APIRouter(tags=["auth"])


def _token_data(user: User, token: IssuedToken) -> TokenData:
    return TokenData(
        user=UserPublic.model_validate(user),
        token=token.token,
        expires_in=int((token.expires_at - token.issued_at).total_seconds()),
    )


@router.post(
    "/register",
    response_model=Envelope[TokenData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    payload: RegisterRequest,
    auth_service: AuthServiceDependency,
) -> Envelope[TokenData]:
    user = await auth_service.register_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    token = auth_service.issue_token(user)
    return Envelope[TokenData](
        message="User registered successfully",
        data=_token_data(user, token),
    )


@router.post(
    "/login",
    response_model=Envelope[TokenData],
    summary="Exchange email and password for an access token",
)
async def login(
    payload: LoginRequest,
    auth_service: AuthServiceDependency,
) -> Envelope[TokenData]:
    user = await auth_service.authenticate_user(payload.email, payload.password)
    if user is None:
        raise AuthenticationError("Invalid credentials")

    token = auth_service.issue_token(user)
    return Envelope[TokenData](
        message="Login successful",
        data=_token_data(user, token),
    )


@router.get(
    "/me",
    response_model=Envelope[UserData],
    summary="Return the authenticated user",
)
async def read_current_user(current_user: CurrentUserDependency) -> Envelope[UserData]:
    return Envelope[UserData](data=UserData(user=UserPublic.model_validate(current_user)))


@router.post(
    "/logout",
    response_model=Envelope[None],
    summary="Revoke the presented access token",
)
async def logout(
    current_user: CurrentUserDependency,
    token_payload: TokenPayloadDependency,
    auth_service: AuthServiceDependency,
) -> Envelope[None]:
    auth_service.revoke(token_payload)
    return Envelope[None](message="Successfully logged out")


@router.post(
    "/refresh",
    response_model=Envelope[TokenData],
    summary="Swap the presented access token for a fresh one",
)
async def refresh(
    current_user: CurrentUserDependency,
    token_payload: TokenPayloadDependency,
    auth_service: AuthServiceDependency,
) -> Envelope[TokenData]:
    token = auth_service.refresh(current_user, token_payload)
    return Envelope[TokenData](
        message="Token refreshed successfully",
        data=_token_data(current_user, token),
    )
