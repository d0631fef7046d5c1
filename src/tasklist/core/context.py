"""Per-request correlation id shared between middleware, handlers and logs."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "-"

request_id_var: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def current_request_id() -> str:
    return request_id_var.get()


@contextmanager
def request_id_scope(request_id: str | None) -> Iterator[str]:
    """Make ``request_id`` the current id until the block exits.

    A falsy id leaves whatever is already bound in place.
    """

    if not request_id:
        yield current_request_id()
        return
    token = request_id_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_var.reset(token)


__all__ = [
    "NO_REQUEST_ID",
    "REQUEST_ID_HEADER",
    "current_request_id",
    "request_id_scope",
    "request_id_var",
]
