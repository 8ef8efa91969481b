"""Tests for logging setup."""

import json
import logging

import pytest

from midway.config import ObservabilityConfig
from midway.observability import JSONFormatter, configure_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_includes_extra_fields():
    logger = logging.getLogger("midway.test")
    record = logger.makeRecord(
        "midway.test",
        logging.WARNING,
        __file__,
        1,
        "Duration queries failed",
        (),
        None,
        extra={"degraded_legs": 3, "policy": "zero"},
    )

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Duration queries failed"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "midway.test"
    assert payload["degraded_legs"] == 3
    assert payload["policy"] == "zero"
    assert "lineno" not in payload


def test_configure_logging_replaces_its_handler(root_logger):
    configure_logging(ObservabilityConfig(level="DEBUG"))
    handler = configure_logging(ObservabilityConfig(level="warning", structured=True))

    ours = [h for h in root_logger.handlers if h.get_name() == "midway"]
    assert ours == [handler]
    assert isinstance(handler.formatter, JSONFormatter)
    assert root_logger.level == logging.WARNING


def test_http_client_request_lines_stay_quiet(root_logger):
    httpx_logger = logging.getLogger("httpx")
    previous = httpx_logger.level
    try:
        configure_logging(ObservabilityConfig(level="DEBUG"))
        assert root_logger.level == logging.DEBUG
        assert not httpx_logger.isEnabledFor(logging.INFO)
        assert httpx_logger.isEnabledFor(logging.WARNING)
    finally:
        httpx_logger.setLevel(previous)
