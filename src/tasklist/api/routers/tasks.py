"""Routes handling task CRUD, listing and statistics."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy.exc import SQLAlchemyError

from ...deps import CurrentUserDependency, DatabaseSessionDependency
from ...errors import ServerError
from ...models import Task, TaskStatus, User
from ...schemas import (
    Envelope,
    PaginationMeta,
    TaskCreate,
    TaskData,
    TaskListData,
    TaskRead,
    TaskStats,
    TaskStatsData,
    TaskUpdate,
)
from ...services import TaskListQuery, TaskService
from ...services.queries import DEFAULT_PER_PAGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

StatusQuery = Annotated[
    str | None,
    Query(
        alias="status",
        description="Only return tasks in this status; unknown values are ignored.",
    ),
]
SearchQuery = Annotated[
    str | None,
    Query(description="Substring to look for in task titles."),
]
SortByQuery = Annotated[
    str | None,
    Query(description="One of title, status, created_at, updated_at."),
]
SortOrderQuery = Annotated[
    str | None,
    Query(description="`asc` for ascending; anything else sorts descending."),
]
PerPageQuery = Annotated[
    int,
    Query(description="Page size, clamped to the range 1..100."),
]
PageQuery = Annotated[
    int,
    Query(description="1-based page number."),
]


@contextmanager
def _storage_guard(message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception(message)
        raise ServerError(message, error=str(exc)) from exc


def _require_user_id(user: User) -> int:
    if user.id is None:  # pragma: no cover - persisted users always carry an id
        raise ServerError("Authenticated user is missing an identifier.")
    return user.id


def _map_task(task: Task) -> TaskRead:
    return TaskRead.model_validate(task)


@router.get(
    "",
    response_model=Envelope[TaskListData],
    summary="List the caller's tasks with filtering, sorting and pagination",
)
async def list_tasks(
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    status_filter: StatusQuery = None,
    search: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    per_page: PerPageQuery = DEFAULT_PER_PAGE,
    page: PageQuery = 1,
) -> Envelope[TaskListData]:
    query = TaskListQuery.from_params(
        status=status_filter,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        per_page=per_page,
        page=page,
    )
    service = TaskService(session)
    with _storage_guard("Failed to fetch tasks"):
        result = await service.list_tasks(owner_id=_require_user_id(current_user), query=query)

    return Envelope[TaskListData](
        data=TaskListData(
            tasks=[_map_task(task) for task in result.items],
            pagination=PaginationMeta(
                current_page=result.current_page,
                last_page=result.last_page,
                per_page=result.per_page,
                total=result.total,
                from_=result.first_item,
                to=result.last_item,
            ),
        )
    )


@router.get(
    "/stats",
    response_model=Envelope[TaskStatsData],
    summary="Count the caller's tasks per status",
)
async def get_task_stats(
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
) -> Envelope[TaskStatsData]:
    service = TaskService(session)
    with _storage_guard("Failed to fetch task statistics"):
        stats = await service.get_task_statistics(owner_id=_require_user_id(current_user))

    return Envelope[TaskStatsData](
        data=TaskStatsData(
            stats=TaskStats(
                total=stats.total,
                pending=stats.by_status[TaskStatus.PENDING],
                in_progress=stats.by_status[TaskStatus.IN_PROGRESS],
                done=stats.by_status[TaskStatus.DONE],
            )
        )
    )


@router.post(
    "",
    response_model=Envelope[TaskData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    payload: TaskCreate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
) -> Envelope[TaskData]:
    service = TaskService(session)
    with _storage_guard("Failed to create task"):
        task = await service.create_task(
            owner_id=_require_user_id(current_user),
            title=payload.title,
            description=payload.description,
            status=payload.status,
        )
    return Envelope[TaskData](
        message="Task created successfully",
        data=TaskData(task=_map_task(task)),
    )


@router.get(
    "/{task_id}",
    response_model=Envelope[TaskData],
    summary="Retrieve one of the caller's tasks",
)
async def get_task(
    task_id: int,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
) -> Envelope[TaskData]:
    service = TaskService(session)
    with _storage_guard("Failed to fetch task"):
        task = await service.get_owned_task(owner_id=_require_user_id(current_user), task_id=task_id)
    return Envelope[TaskData](data=TaskData(task=_map_task(task)))


@router.put(
    "/{task_id}",
    response_model=Envelope[TaskData],
    summary="Partially update one of the caller's tasks",
)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
) -> Envelope[TaskData]:
    service = TaskService(session)
    with _storage_guard("Failed to update task"):
        task = await service.update_task(
            owner_id=_require_user_id(current_user),
            task_id=task_id,
            changes=payload.changes(),
        )
    return Envelope[TaskData](
        message="Task updated successfully",
        data=TaskData(task=_map_task(task)),
    )


@router.delete(
    "/{task_id}",
    response_model=Envelope[None],
    summary="Delete one of the caller's tasks",
)
async def delete_task(
    task_id: int,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
) -> Envelope[None]:
    service = TaskService(session)
    with _storage_guard("Failed to delete task"):
        await service.delete_task(owner_id=_require_user_id(current_user), task_id=task_id)
    return Envelope[None](message="Task deleted successfully")
