"""Unit tests for structured logging setup"""

import json
import logging

import pytest

from paylike_client.config import settings
from paylike_client.infrastructure.observability.logging import CustomJsonFormatter, setup_logging


def test_json_formatter_adds_service_metadata():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service="billing")
    record = logging.LogRecord("paylike_client", logging.INFO, __file__, 1, "Created app", None, None)
    record.app_id = "a1"

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "Created app"
    assert payload["level"] == "INFO"
    assert payload["service"] == "billing"
    assert payload["app_id"] == "a1"
    assert "timestamp" in payload


def test_json_formatter_reads_service_name_at_construction(monkeypatch: pytest.MonkeyPatch):
    """A service name configured after import still reaches the log records"""
    monkeypatch.setattr(settings, "service_name", "checkout")
    formatter = CustomJsonFormatter("%(message)s")
    record = logging.LogRecord("paylike_client", logging.INFO, __file__, 1, "hello", None, None)

    assert json.loads(formatter.format(record))["service"] == "checkout"


def test_setup_logging_installs_single_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("WARNING")

        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
