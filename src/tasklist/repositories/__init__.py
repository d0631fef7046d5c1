"""Database repositories for encapsulating persistence logic."""

from __future__ import annotations

from .tasks import SORTABLE_COLUMNS, TaskRepository
from .users import UserRepository

__all__ = ["SORTABLE_COLUMNS", "TaskRepository", "UserRepository"]
