from __future__ import annotations

import logging
import warnings

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, OperationalError

from tasklist.core.logging import RequestContextFilter
from tasklist.errors import ApplicationError, ValidationError, collect_field_errors
from tasklist.repositories import TaskRepository


class ExamplePayload(BaseModel):
    name: str
    size: int


@pytest.mark.asyncio
async def test_application_error_response_schema(app: FastAPI, client: AsyncClient) -> None:
    @app.get("/error/application")
    async def trigger_application_error() -> None:  # pragma: no cover - defined in test
        raise ApplicationError(
            "Example failure",
            status_code=status.HTTP_418_IM_A_TEAPOT,
            errors={"field": ["is wrong"]},
        )

    response = await client.get("/error/application")

    assert response.status_code == status.HTTP_418_IM_A_TEAPOT
    assert response.json() == {
        "success": False,
        "message": "Example failure",
        "errors": {"field": ["is wrong"]},
    }
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_validation_error_groups_messages_by_field(app: FastAPI, client: AsyncClient) -> None:
    @app.post("/error/validation")
    async def create_item(_: ExamplePayload) -> None:  # pragma: no cover - defined in test
        return None

    response = await client.post("/error/validation", json={"size": "large"})

    assert response.status_code == 422
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Validation failed"
    assert set(payload["errors"]) == {"name", "size"}
    assert all(isinstance(messages, list) and messages for messages in payload["errors"].values())


@pytest.mark.asyncio
async def test_not_found_route_uses_error_envelope(client: AsyncClient) -> None:
    response = await client.get("/error/not-found")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"]
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_integrity_error_response_schema(app: FastAPI, client: AsyncClient) -> None:
    @app.get("/error/database")
    async def trigger_integrity_error() -> None:  # pragma: no cover - defined in test
        raise IntegrityError("statement", {}, Exception("constraint"))

    response = await client.get("/error/database")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"success": False, "message": "Database integrity violation."}


@pytest.mark.asyncio
async def test_unhandled_error_hides_internal_details(app: FastAPI) -> None:
    @app.get("/error/unhandled")
    async def trigger_unhandled_error() -> None:  # pragma: no cover - defined in test
        raise RuntimeError("Sensitive detail")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/error/unhandled", headers={"X-Request-ID": "req-500"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "message": "Internal server error."}
    assert response.headers["X-Request-ID"] == "req-500"
    assert "Sensitive" not in response.text


@pytest.mark.asyncio
async def test_storage_failure_while_listing(
    app: FastAPI,
    client: AsyncClient,
    authenticated_user,
    monkeypatch,
) -> None:
    user = await authenticated_user()

    async def _broken_listing(*_: object, **__: object) -> None:
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(TaskRepository, "list_paginated", _broken_listing)

    hidden = await client.get("/api/tasks", headers=user.headers)
    assert hidden.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert hidden.json() == {"success": False, "message": "Failed to fetch tasks"}

    app.state.settings.expose_error_details = True
    exposed = await client.get("/api/tasks", headers=user.headers)
    exposed_json = exposed.json()
    assert exposed_json["message"] == "Failed to fetch tasks"
    assert "database is locked" in exposed_json["error"]


@pytest.mark.asyncio
async def test_storage_failure_while_counting(
    client: AsyncClient,
    authenticated_user,
    monkeypatch,
) -> None:
    user = await authenticated_user()

    async def _broken_counts(*_: object, **__: object) -> None:
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(TaskRepository, "count_by_status", _broken_counts)

    response = await client.get("/api/tasks/stats", headers=user.headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "message": "Failed to fetch task statistics"}


@pytest.mark.asyncio
async def test_incoming_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/healthz", headers={"X-Request-ID": "req-echo-1"})

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["X-Request-ID"] == "req-echo-1"


@pytest.mark.asyncio
async def test_oversized_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.get("/healthz", headers={"X-Request-ID": "x" * 200})

    assert response.status_code == status.HTTP_200_OK
    request_id = response.headers["X-Request-ID"]
    assert request_id != "x" * 200
    assert len(request_id) == 32


def test_collect_field_errors_strips_value_error_prefix() -> None:
    grouped = collect_field_errors(
        [
            {"loc": ("body", "password_confirmation"), "msg": "Value error, Passwords differ."},
            {"loc": ("body", "tags", 0), "msg": "Input should be a valid string"},
            {"loc": ("body",), "msg": "Field required"},
        ]
    )

    assert grouped == {
        "password_confirmation": ["Passwords differ."],
        "tags": ["Input should be a valid string"],
        "body": ["Field required"],
    }


@pytest.mark.asyncio
async def test_handled_errors_are_logged_with_request_id(
    app: FastAPI,
    client: AsyncClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    @app.get("/error/logged")
    async def trigger_logged_error() -> None:  # pragma: no cover - defined in test
        raise ApplicationError("Teapot refused", status_code=status.HTTP_418_IM_A_TEAPOT)

    caplog.handler.addFilter(RequestContextFilter())
    caplog.set_level(logging.WARNING, logger="tasklist.errors")

    response = await client.get("/error/logged", headers={"X-Request-ID": "req-logged"})

    assert response.status_code == status.HTTP_418_IM_A_TEAPOT
    warnings = [record for record in caplog.records if record.getMessage() == "Teapot refused"]
    assert [record.request_id for record in warnings] == ["req-logged"]
    assert warnings[0].status_code == status.HTTP_418_IM_A_TEAPOT


@pytest.mark.asyncio
async def test_validation_responses_use_no_deprecated_status_names(client: AsyncClient) -> None:
    with warnings.catch_warnings():
        warnings.filterwarnings("error", category=DeprecationWarning, module=r"tasklist\.")
        response = await client.post("/api/login", json={"email": "not-an-email"})

    assert response.status_code == 422
    assert ValidationError().status_code == 422
