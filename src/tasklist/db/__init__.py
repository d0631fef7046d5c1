"""Database engine, sessions and schema bootstrap."""

from __future__ import annotations

from .session import (
    async_session_maker,
    build_engine,
    enable_sqlite_foreign_keys,
    engine,
    get_session,
    init_db,
)

__all__ = [
    "async_session_maker",
    "build_engine",
    "enable_sqlite_foreign_keys",
    "engine",
    "get_session",
    "init_db",
]
