"""Domain models exposed by the task list service."""

from __future__ import annotations

from .common import TimestampMixin, utcnow
from .task import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Task, TaskStatus
from .user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, User

__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "EMAIL_MAX_LENGTH",
    "NAME_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "Task",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "utcnow",
]
