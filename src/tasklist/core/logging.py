"""JSON logging for the task list service.

Every line written to stdout is one JSON object. Fields passed through
``extra=`` end up as top-level keys next to the standard ones.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import NO_REQUEST_ID, current_request_id

# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "request_id", "taskName"}

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, static_fields: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        entry: dict[str, Any] = {
            **self.static_fields,
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", NO_REQUEST_ID),
        }
        extras = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRS and key not in entry
        }
        entry.update(extras)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp each record with the request id bound to the current context."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = current_request_id()
        return True


def build_logging_config(settings: Settings) -> dict[str, Any]:
    """Return the ``dictConfig`` mapping for ``settings``."""

    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    server_loggers = {
        name: {"handlers": ["stdout"], "level": level, "propagate": False}
        for name in _SERVER_LOGGERS
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_context": {"()": RequestContextFilter}},
        "formatters": {
            "json": {
                "()": JsonLogFormatter,
                "static_fields": {
                    "service": settings.project_name,
                    "environment": settings.environment,
                },
            }
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "level": level,
                "formatter": "json",
                "filters": ["request_context"],
            }
        },
        "root": {"handlers": ["stdout"], "level": level},
        "loggers": server_loggers,
    }


def configure_logging(settings: Settings) -> None:
    logging.captureWarnings(True)
    logging.config.dictConfig(build_logging_config(settings))


__all__ = [
    "JsonLogFormatter",
    "RequestContextFilter",
    "build_logging_config",
    "configure_logging",
]
