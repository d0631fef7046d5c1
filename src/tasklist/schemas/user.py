"""User-facing Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr


class UserPublic(BaseModel):
    """Minimal public representation of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: EmailStr
    created_at: datetime


class UserData(BaseModel):
    """``data`` payload holding the current user."""

    user: UserPublic


__all__ = ["UserData", "UserPublic"]
