"""Uniform JSON envelope wrapping every API response."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Successful response carrying an optional message and payload."""

    success: bool = Field(default=True)
    message: str | None = Field(default=None)
    data: DataT | None = Field(default=None)

    @model_serializer(mode="wrap")
    def _omit_absent_keys(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Only top-level keys are dropped; nulls inside ``data`` are kept.
        payload = handler(self)
        return {key: value for key, value in payload.items() if value is not None}


class ErrorEnvelope(BaseModel):
    """Failure response returned by the exception handlers."""

    success: bool = Field(default=False)
    message: str = Field(description="Human-readable error message")
    errors: dict[str, list[str]] | None = Field(
        default=None,
        description="Field-level validation messages keyed by field name.",
    )
    error: str | None = Field(
        default=None,
        description="Diagnostic detail for server errors; not a stable contract.",
    )

    def to_content(self) -> dict[str, Any]:
        """Return the JSON body with unset optional keys omitted."""
        return self.model_dump(exclude_none=True)


__all__ = ["Envelope", "ErrorEnvelope"]
