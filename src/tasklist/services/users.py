"""Account persistence used by registration and token resolution."""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.security import hash_password
from ..models import User
from ..repositories import UserRepository


class UserService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepository(session)

    async def create_user(self, *, name: str, email: str, password: str) -> User:
        """Store a new account with a bcrypt hash of ``password``."""
        user = await self._users.save(
            User(name=name, email=email, hashed_password=hash_password(password))
        )
        await self._session.commit()
        return user

    async def get_user(self, user_id: int) -> User | None:
        return await self._users.get(user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        return await self._users.get_by_email(email)
