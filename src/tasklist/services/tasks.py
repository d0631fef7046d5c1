"""Service layer encapsulating task-related operations.

Every method takes the owner's id explicitly; nothing here looks up the
current user on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import NotFoundError
from ..models import Task, TaskStatus, utcnow
from ..repositories import TaskRepository
from .queries import TaskListQuery, TaskPage

logger = logging.getLogger(__name__)

# Upper bound of the INTEGER primary key column on PostgreSQL.
MAX_TASK_ID = 2**31 - 1


class TaskNotFoundError(NotFoundError):
    """Raised when a task is missing or owned by somebody else."""

    def __init__(self) -> None:
        super().__init__("Task not found")


@dataclass(slots=True)
class TaskStatisticsResult:
    """Per-status task counts for one owner."""

    total: int
    by_status: dict[TaskStatus, int]


class TaskService:
    """Task use cases, each confined to the tasks of one owner."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = TaskRepository(session)

    async def get_owned_task(self, *, owner_id: int, task_id: int) -> Task:
        """Return the owner's task or raise ``TaskNotFoundError``.

        A task that exists but belongs to another user produces the same error
        as one that does not exist at all.
        """
        if not 1 <= task_id <= MAX_TASK_ID:
            raise TaskNotFoundError()
        task = await self._repository.get_for_owner(task_id, owner_id)
        if task is None:
            raise TaskNotFoundError()
        return task

    async def create_task(
        self,
        *,
        owner_id: int,
        title: str,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        """Persist a task for ``owner_id``; ``status`` falls back to pending."""
        task = Task(
            owner_id=owner_id,
            title=title,
            description=description,
            status=status or TaskStatus.PENDING,
        )
        await self._repository.save(task)
        await self._session.commit()
        logger.info("Task created", extra={"task_id": task.id, "owner_id": owner_id})
        return task

    async def list_tasks(self, *, owner_id: int, query: TaskListQuery) -> TaskPage:
        """Return one filtered, sorted page of the owner's tasks."""
        tasks, total = await self._repository.list_paginated(
            owner_id=owner_id,
            status=query.status,
            search=query.search,
            sort_by=query.sort_by,
            descending=query.descending,
            limit=query.per_page,
            offset=query.offset,
        )
        return TaskPage(
            items=tasks,
            total=total,
            per_page=query.per_page,
            current_page=query.page,
        )

    async def update_task(
        self,
        *,
        owner_id: int,
        task_id: int,
        changes: dict[str, Any],
    ) -> Task:
        """Apply the supplied fields to the owner's task and persist them.

        Keys absent from ``changes`` are left untouched; a present key is applied
        even when its value is ``None``.
        """
        task = await self.get_owned_task(owner_id=owner_id, task_id=task_id)
        for field_name, value in changes.items():
            setattr(task, field_name, value)
        task.updated_at = utcnow()
        await self._session.commit()
        await self._repository.reload(task)
        logger.info(
            "Task updated",
            extra={"task_id": task.id, "owner_id": owner_id, "fields": sorted(changes)},
        )
        return task

    async def delete_task(self, *, owner_id: int, task_id: int) -> None:
        """Permanently remove the owner's task."""
        task = await self.get_owned_task(owner_id=owner_id, task_id=task_id)
        await self._repository.remove(task)
        await self._session.commit()
        logger.info("Task deleted", extra={"task_id": task_id, "owner_id": owner_id})

    async def get_task_statistics(self, *, owner_id: int) -> TaskStatisticsResult:
        """Return total and per-status counts, zero-filled for unused statuses."""
        counts = await self._repository.count_by_status(owner_id)
        by_status = {status: counts.get(status, 0) for status in TaskStatus}
        return TaskStatisticsResult(
            total=sum(by_status.values()),
            by_status=by_status,
        )


__all__ = ["TaskNotFoundError", "TaskService", "TaskStatisticsResult"]
