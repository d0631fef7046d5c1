"""SQL for the ``tasks`` table.

Every query here is built with an ``owner_id`` condition; there is no way to
read another user's rows through this repository.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func
from sqlmodel import col, select

from ..models import Task, TaskStatus
from .base import BaseRepository

SORTABLE_COLUMNS: dict[str, Any] = {
    "title": col(Task.title),
    "status": col(Task.status),
    "created_at": col(Task.created_at),
    "updated_at": col(Task.updated_at),
}


class TaskRepository(BaseRepository[Task]):
    model = Task

    @staticmethod
    def _conditions(
        owner_id: int,
        status: TaskStatus | None = None,
        search: str | None = None,
    ) -> list[Any]:
        conditions: list[Any] = [col(Task.owner_id) == owner_id]
        if status is not None:
            conditions.append(col(Task.status) == status)
        if search:
            conditions.append(col(Task.title).contains(search, autoescape=True))
        return conditions

    async def get_for_owner(self, task_id: int, owner_id: int) -> Task | None:
        """Return the task only if it belongs to ``owner_id``."""
        result = await self.session.exec(
            select(Task).where(col(Task.id) == task_id, *self._conditions(owner_id))
        )
        return result.first()

    async def list_paginated(
        self,
        *,
        owner_id: int,
        status: TaskStatus | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
        limit: int = 15,
        offset: int = 0,
    ) -> tuple[list[Task], int]:
        """Return one page of matching tasks and the number of matches overall.

        ``id`` breaks ties in the same direction as ``sort_by`` so pages never
        overlap.
        """
        conditions = self._conditions(owner_id, status, search)
        direction = "desc" if descending else "asc"
        ordering = [
            getattr(SORTABLE_COLUMNS[sort_by], direction)(),
            getattr(col(Task.id), direction)(),
        ]

        page = await self.session.exec(
            select(Task).where(*conditions).order_by(*ordering).offset(offset).limit(limit)
        )
        total = await self.session.exec(
            select(func.count()).select_from(Task).where(*conditions)
        )
        return list(page.all()), int(total.one())

    async def count_by_status(self, owner_id: int) -> dict[TaskStatus, int]:
        """Map each status present among the owner's tasks to its count."""
        result = await self.session.exec(
            select(col(Task.status), func.count())
            .where(*self._conditions(owner_id))
            .group_by(col(Task.status))
        )
        return {TaskStatus(status): int(count) for status, count in result.all()}
