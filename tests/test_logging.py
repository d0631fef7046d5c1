from __future__ import annotations

import io
import json
import logging

from tasklist.core.config import Settings
from tasklist.core.context import request_id_scope
from tasklist.core.logging import JsonLogFormatter, configure_logging


def _json_handler() -> logging.Handler:
    handler = next(
        (h for h in logging.getLogger().handlers if isinstance(h.formatter, JsonLogFormatter)),
        None,
    )
    assert handler is not None, "Expected JSON stream handler to be configured"
    return handler


def test_configure_logging_outputs_json_with_request_id() -> None:
    settings = Settings(environment="test", log_level="info")
    configure_logging(settings)

    handler = _json_handler()
    assert isinstance(handler, logging.StreamHandler)
    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)

    try:
        with request_id_scope("req-json-1"):
            logger = logging.getLogger("tasklist.tests.logging")
            logger.info("structured log event", extra={"component": "unit-test"})
    finally:
        handler.flush()
        handler.setStream(previous_stream)

    log_lines = buffer.getvalue().strip().splitlines()
    assert log_lines, "Expected structured log line to be captured"
    payload = json.loads(log_lines[-1])

    assert payload["message"] == "structured log event"
    assert payload["request_id"] == "req-json-1"
    assert payload["environment"] == settings.environment
    assert payload["level"] == "INFO"
    assert payload["logger"] == "tasklist.tests.logging"
    assert payload["component"] == "unit-test"
    assert payload["service"] == settings.project_name


def test_log_lines_outside_a_request_use_placeholder_id() -> None:
    settings = Settings(environment="test", log_level="DEBUG")
    configure_logging(settings)

    handler = _json_handler()
    assert isinstance(handler, logging.StreamHandler)
    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)
    try:
        logging.getLogger("tasklist.tests.logging").debug("background event", extra={"ids": {1, 2}})
    finally:
        handler.flush()
        handler.setStream(previous_stream)

    payload = json.loads(buffer.getvalue().strip().splitlines()[-1])
    assert payload["request_id"] == "-"
    assert payload["level"] == "DEBUG"
    assert isinstance(payload["ids"], str)
