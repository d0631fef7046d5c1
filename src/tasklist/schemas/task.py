"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TaskStatus

TASK_READ_EXAMPLE = {
    "id": 1,
    "title": "Draft product documentation",
    "description": "Outline sections for the public API guide.",
    "status": TaskStatus.PENDING.value,
    "user_id": 42,
    "created_at": "2024-01-01T12:00:00Z",
    "updated_at": "2024-01-02T08:30:00Z",
}


class TaskCreate(BaseModel):
    """Payload for creating a new task."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "title": "Draft product documentation",
                "description": "Outline sections for the public API guide.",
                "status": TaskStatus.PENDING.value,
            }
        }
    )

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus | None = Field(default=None)


class TaskUpdate(BaseModel):
    """Payload for partially updating an existing task.

    Only keys present in the request body are applied. ``title`` and ``status``
    may be omitted but not sent as ``null``; ``description`` may be cleared with
    an explicit ``null``.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "title": "Update API documentation",
                "status": TaskStatus.IN_PROGRESS.value,
            }
        }
    )

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus | None = Field(default=None)

    @field_validator("title", "status", mode="before")
    @classmethod
    def _reject_explicit_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field may not be null.")
        return value

    def changes(self) -> dict[str, object]:
        """Return only the fields supplied by the client."""
        return self.model_dump(exclude_unset=True)


class TaskRead(BaseModel):
    """Public representation of a task."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: int
    owner_id: int = Field(serialization_alias="user_id")
    title: str
    description: str | None = None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime


class TaskData(BaseModel):
    """``data`` payload holding a single task."""

    task: TaskRead


class PaginationMeta(BaseModel):
    """Page-number pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    current_page: int
    last_page: int
    per_page: int
    total: int
    from_: int | None = Field(default=None, alias="from")
    to: int | None = None


class TaskListData(BaseModel):
    """``data`` payload for a page of tasks."""

    tasks: list[TaskRead]
    pagination: PaginationMeta


class TaskStats(BaseModel):
    """Per-status task counts for one owner."""

    total: int = Field(ge=0)
    pending: int = Field(ge=0)
    in_progress: int = Field(ge=0)
    done: int = Field(ge=0)


class TaskStatsData(BaseModel):
    """``data`` payload for task statistics."""

    stats: TaskStats


__all__ = [
    "PaginationMeta",
    "TaskCreate",
    "TaskData",
    "TaskListData",
    "TaskRead",
    "TaskStats",
    "TaskStatsData",
    "TaskUpdate",
]
