"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import LoginRequest, RegisterRequest, TokenData, TokenPayload
from .envelope import Envelope, ErrorEnvelope
from .system import HealthCheckResponse, RootResponse
from .task import (
    PaginationMeta,
    TaskCreate,
    TaskData,
    TaskListData,
    TaskRead,
    TaskStats,
    TaskStatsData,
    TaskUpdate,
)
from .user import UserData, UserPublic

__all__ = [
    "Envelope",
    "ErrorEnvelope",
    "HealthCheckResponse",
    "LoginRequest",
    "PaginationMeta",
    "RegisterRequest",
    "RootResponse",
    "TaskCreate",
    "TaskData",
    "TaskListData",
    "TaskRead",
    "TaskStats",
    "TaskStatsData",
    "TaskUpdate",
    "TokenData",
    "TokenPayload",
    "UserData",
    "UserPublic",
]
