"""Schemas describing authentication payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

from ..models import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from .user import UserPublic

PASSWORD_MIN_LENGTH = 8
# bcrypt ignores everything past 72 bytes
PASSWORD_MAX_BYTES = 72


class RegisterRequest(BaseModel):
    """Incoming payload for registering a new user."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "correct-horse",
                "password_confirmation": "correct-horse",
            }
        }
    )

    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    password_confirmation: str

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email")
    @classmethod
    def _email_fits_column(cls, value: str) -> str:
        if len(value) > EMAIL_MAX_LENGTH:
            raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters.")
        return value

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded.")
        return value

    @field_validator("password_confirmation")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Password confirmation does not match.")
        return value


class LoginRequest(BaseModel):
    """Credentials submitted to obtain an access token."""

    email: EmailStr
    password: str = Field(min_length=1)


class TokenData(BaseModel):
    """``data`` payload returned after registration, login or refresh."""

    user: UserPublic
    token: str
    token_type: str = Field(default="bearer", frozen=True)
    expires_in: int


class TokenPayload(BaseModel):
    """Validated JWT payload."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: datetime
    iat: datetime
    jti: str


__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "TokenData",
    "TokenPayload",
]
