"""Session-bound persistence helpers shared by the concrete repositories."""

from __future__ import annotations

from typing import ClassVar, Generic, TypeVar

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Flush-only helpers; committing is left to the service layer."""

    model: ClassVar[type[SQLModel]]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, entity_id: int) -> ModelType | None:
        return await self.session.get(self.model, entity_id)  # type: ignore[return-value]

    async def save(self, instance: ModelType) -> ModelType:
        """Write ``instance`` and load database-generated values back onto it."""
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def remove(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.flush()

    async def reload(self, instance: ModelType) -> ModelType:
        await self.session.refresh(instance)
        return instance
