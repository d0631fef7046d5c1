"""HTTP middleware for the task list service."""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .context import REQUEST_ID_HEADER, request_id_scope

MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: Request, header_name: str) -> str:
    supplied = request.headers.get(header_name, "").strip()
    if supplied and len(supplied) <= MAX_REQUEST_ID_LENGTH and supplied.isprintable():
        return supplied
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's request id (or mint one) and echo it on the response."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _incoming_request_id(request, self.header_name)
        request.state.request_id = request_id
        with request_id_scope(request_id):
            response = await call_next(request)
        if self.header_name not in response.headers:
            response.headers[self.header_name] = request_id
        return response


__all__ = ["CorrelationIdMiddleware", "MAX_REQUEST_ID_LENGTH"]
