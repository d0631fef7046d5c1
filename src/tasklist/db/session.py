"""Async engine and session factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings, get_settings


def enable_sqlite_foreign_keys(target: AsyncEngine) -> None:
    """Turn on ``PRAGMA foreign_keys`` for every new SQLite connection.

    SQLite ignores ``ON DELETE CASCADE`` without it. Other dialects are left alone.
    """

    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target.sync_engine, "connect")
    def _foreign_keys_on(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()


def build_engine(settings: Settings, **engine_kwargs: Any) -> AsyncEngine:
    built = create_async_engine(
        settings.database_url,
        echo=settings.db_echo,
        pool_pre_ping=True,
        **engine_kwargs,
    )
    enable_sqlite_foreign_keys(built)
    return built


engine = build_engine(get_settings())
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        yield session


async def init_db(target: AsyncEngine | None = None) -> None:
    """Create missing tables from the model metadata."""

    from .. import models  # noqa: F401

    async with (target or engine).begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
