"""Account table."""

from __future__ import annotations

from sqlmodel import Field

from .common import TimestampMixin

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255


class User(TimestampMixin, table=True):
    """A registered account; owns zero or more tasks."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, nullable=False)
    email: str = Field(max_length=EMAIL_MAX_LENGTH, unique=True, nullable=False)
    hashed_password: str = Field(max_length=255, nullable=False)


__all__ = ["EMAIL_MAX_LENGTH", "NAME_MAX_LENGTH", "User"]
