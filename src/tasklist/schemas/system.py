"""Response models for the unprefixed system endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    name: str
    environment: str
    version: str = Field(description="Package version of the running service")
    api_prefix: str = Field(description="Path prefix under which the JSON API is mounted")


class HealthCheckResponse(BaseModel):
    status: Literal["ok"] = "ok"
