"""Normalisation of task listing parameters and page metadata."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..models import Task, TaskStatus
from ..repositories import SORTABLE_COLUMNS

DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100
# Largest page whose row offset still fits a signed 64-bit OFFSET.
MAX_PAGE = (2**63 - 1) // MAX_PER_PAGE
DEFAULT_SORT_FIELD = "created_at"

_STATUS_VALUES = {member.value: member for member in TaskStatus}


@dataclass(slots=True, frozen=True)
class TaskListQuery:
    """Lenient view of the listing parameters a client sent.

    Unknown ``status`` or ``sort_by`` values are dropped instead of rejected, and
    ``per_page``/``page`` are clamped into a usable range.
    """

    status: TaskStatus | None = None
    search: str | None = None
    sort_by: str = DEFAULT_SORT_FIELD
    descending: bool = True
    per_page: int = DEFAULT_PER_PAGE
    page: int = 1

    @classmethod
    def from_params(
        cls,
        *,
        status: str | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        per_page: int | None = None,
        page: int | None = None,
    ) -> "TaskListQuery":
        resolved_status = _STATUS_VALUES.get(status) if status is not None else None

        if sort_by in SORTABLE_COLUMNS:
            resolved_sort = sort_by
            descending = sort_order != "asc"
        else:
            resolved_sort = DEFAULT_SORT_FIELD
            descending = True

        size = DEFAULT_PER_PAGE if per_page is None else per_page
        size = max(min(size, MAX_PER_PAGE), 1)

        return cls(
            status=resolved_status,
            search=search or None,
            sort_by=resolved_sort,
            descending=descending,
            per_page=size,
            page=min(max(page or 1, 1), MAX_PAGE),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(slots=True)
class TaskPage:
    """One page of tasks plus the numbers needed to navigate the rest."""

    items: list[Task]
    total: int
    per_page: int
    current_page: int

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def first_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + len(self.items)


__all__ = [
    "DEFAULT_PER_PAGE",
    "DEFAULT_SORT_FIELD",
    "MAX_PAGE",
    "MAX_PER_PAGE",
    "TaskListQuery",
    "TaskPage",
]
