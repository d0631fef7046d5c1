"""Tasks and their workflow states."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"


# Stored as VARCHAR holding the enum values, not the member names.
task_status_type = sa.Enum(
    TaskStatus,
    name="task_status",
    native_enum=False,
    validate_strings=True,
    values_callable=lambda statuses: [status.value for status in statuses],
)


class Task(TimestampMixin, table=True):
    """A task row; every task belongs to exactly one user."""

    __tablename__ = "tasks"
    __table_args__ = (
        sa.CheckConstraint("length(title) > 0", name="ck_tasks_title_not_empty"),
        sa.Index("ix_tasks_owner_id_status", "owner_id", "status"),
    )

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH, nullable=False)
    description: str | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        sa_type=sa.Text,
    )
    status: TaskStatus = Field(
        default=TaskStatus.PENDING,
        sa_type=task_status_type,
        sa_column_kwargs={"server_default": TaskStatus.PENDING.value},
        nullable=False,
    )
    owner_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True, nullable=False)


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "Task",
    "TaskStatus",
    "task_status_type",
]
