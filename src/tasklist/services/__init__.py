"""Domain service layer package."""

from __future__ import annotations

from .auth import AuthService
from .queries import TaskListQuery, TaskPage
from .tasks import TaskNotFoundError, TaskService, TaskStatisticsResult
from .users import UserService

__all__ = [
    "AuthService",
    "TaskListQuery",
    "TaskNotFoundError",
    "TaskPage",
    "TaskService",
    "TaskStatisticsResult",
    "UserService",
]
