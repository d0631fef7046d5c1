"""Unprefixed endpoints for probes and service discovery."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import SettingsDependency
from ...schemas.system import HealthCheckResponse, RootResponse

router = APIRouter(tags=["system"])


@router.get("/", response_model=RootResponse, summary="Service metadata")
async def read_root(settings: SettingsDependency) -> RootResponse:
    return RootResponse(
        name=settings.project_name,
        environment=settings.environment,
        version=settings.version,
        api_prefix=settings.router_prefix,
    )


@router.get("/healthz", response_model=HealthCheckResponse, summary="Liveness probe")
async def read_health() -> HealthCheckResponse:
    """Answer as long as the process can serve requests; the database is not touched."""
    return HealthCheckResponse()
