"""Exception hierarchy and the handlers that turn failures into error envelopes."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, request_id_scope
from .schemas.envelope import ErrorEnvelope

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed"
INTERNAL_ERROR = "Internal server error."
UNPROCESSABLE = 422


class ApplicationError(Exception):
    """Base class for errors that map onto a specific HTTP response."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        errors: Mapping[str, list[str]] | None = None,
        error: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = dict(errors) if errors else None
        self.error = error
        self.headers = dict(headers) if headers else None


class ValidationError(ApplicationError):
    """Field-level rejection; ``errors`` maps field names to messages."""

    status_code = UNPROCESSABLE

    def __init__(
        self,
        message: str = VALIDATION_FAILED,
        *,
        errors: Mapping[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message, errors=errors)


class NotFoundError(ApplicationError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class AuthenticationError(ApplicationError):
    """Missing, invalid, expired or revoked bearer credential."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthenticated") -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ServerError(ApplicationError):
    """Failure on our side; ``error`` keeps the underlying detail for diagnostics."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = INTERNAL_ERROR, *, error: str | None = None) -> None:
        super().__init__(message, error=error)


def collect_field_errors(raw_errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic error entries by the innermost named field.

    ``("body", "tags", 0)`` is reported under ``tags``; pydantic's
    ``"Value error, "`` prefix is removed from custom validator messages.
    """

    grouped: dict[str, list[str]] = {}
    for entry in raw_errors:
        names = [part for part in entry.get("loc", ()) if isinstance(part, str)]
        field = names[-1] if names else "body"
        message = str(entry.get("msg", "Invalid value."))
        grouped.setdefault(field, []).append(message.removeprefix("Value error, "))
    return grouped


def error_response(
    request: Request,
    status_code: int,
    message: str,
    *,
    errors: Mapping[str, list[str]] | None = None,
    error: str | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    settings = getattr(request.app.state, "settings", None)
    envelope = ErrorEnvelope(
        message=message,
        errors=dict(errors) if errors else None,
        error=error if getattr(settings, "expose_error_details", False) else None,
    )
    response = JSONResponse(envelope.to_content(), status_code=status_code, headers=headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id and REQUEST_ID_HEADER not in response.headers:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
    with request_id_scope(_request_id(request)):
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(exc.message, extra={"status_code": exc.status_code, "error": exc.error})
        else:
            logger.warning(exc.message, extra={"status_code": exc.status_code, "path": request.url.path})
        return error_response(
            request,
            exc.status_code,
            exc.message,
            errors=exc.errors,
            error=exc.error,
            headers=exc.headers,
        )


async def handle_request_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    with request_id_scope(_request_id(request)):
        field_errors = collect_field_errors(exc.errors())
        logger.warning(VALIDATION_FAILED, extra={"fields": sorted(field_errors), "path": request.url.path})
        return error_response(
            request,
            UNPROCESSABLE,
            VALIDATION_FAILED,
            errors=field_errors,
        )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    with request_id_scope(_request_id(request)):
        logger.error("Database integrity violation", exc_info=exc)
        return error_response(request, status.HTTP_409_CONFLICT, "Database integrity violation.")


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    with request_id_scope(_request_id(request)):
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error."
        level = logging.ERROR if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logging.INFO
        logger.log(level, message, extra={"status_code": exc.status_code, "path": request.url.path})
        return error_response(request, exc.status_code, message, headers=exc.headers)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    with request_id_scope(_request_id(request)):
        logger.exception("Unhandled error while serving %s", request.url.path)
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            INTERNAL_ERROR,
            error=f"{type(exc).__name__}: {exc}",
        )


_HANDLERS: tuple[tuple[type[Exception], Callable[[Request, Any], Awaitable[JSONResponse]]], ...] = (
    (ApplicationError, handle_application_error),
    (RequestValidationError, handle_request_validation_error),
    (IntegrityError, handle_integrity_error),
    (StarletteHTTPException, handle_http_exception),
    (Exception, handle_unexpected_error),
)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, handler)


__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "NotFoundError",
    "ServerError",
    "ValidationError",
    "collect_field_errors",
    "error_response",
    "register_exception_handlers",
]
