"""Routers mounted by the application factory."""

from __future__ import annotations

from fastapi import APIRouter

from .auth import router as auth_router
from .system import router as system_router
from .tasks import router as tasks_router

api_router = APIRouter()
for _router in (auth_router, tasks_router):
    api_router.include_router(_router)

__all__ = ["api_router", "auth_router", "system_router", "tasks_router"]
