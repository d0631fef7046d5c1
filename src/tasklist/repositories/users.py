"""Lookups against the ``users`` table."""

from __future__ import annotations

from sqlmodel import select

from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.exec(select(User).where(User.email == email))
        return result.first()
