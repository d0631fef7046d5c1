"""Column helpers shared by the table models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp_field(*, refresh_on_update: bool) -> Any:
    column_kwargs: dict[str, Any] = {"server_default": sa.func.now()}
    if refresh_on_update:
        column_kwargs["onupdate"] = utcnow
    return Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs=column_kwargs,
    )


class TimestampMixin(SQLModel, table=False):
    """``created_at`` is written once; ``updated_at`` moves on every UPDATE."""

    created_at: datetime = _timestamp_field(refresh_on_update=False)
    updated_at: datetime = _timestamp_field(refresh_on_update=True)


__all__ = ["TimestampMixin", "utcnow"]
