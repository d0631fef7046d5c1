from __future__ import annotations

import re

import pytest
from httpx import AsyncClient

from tasklist import __version__


def test_version_is_semver() -> None:
    pattern = r"^\d+\.\d+\.\d+$"
    assert re.match(pattern, __version__) is not None


@pytest.mark.asyncio
async def test_health_endpoint_returns_ok(client: AsyncClient) -> None:
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_root_endpoint_reports_metadata(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Task List API"
    assert body["version"] == __version__
    assert body["environment"] == "test"
    assert body["api_prefix"] == "/api"


@pytest.mark.asyncio
async def test_openapi_schema_is_served_under_prefix(client: AsyncClient) -> None:
    response = await client.get("/api/openapi.json")

    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/api/tasks" in paths
    assert "/api/tasks/{task_id}" in paths
    assert "/api/tasks/stats" in paths
    assert "/api/register" in paths
    for account_path in ("/api/login", "/api/me", "/api/logout", "/api/refresh"):
        assert account_path in paths
    assert not any(path.startswith("/api/auth") for path in paths)
