"""Unit tests for structured logging."""
import sys
sys.path.insert(0, 'backend')

import json
import logging
import pytest
from logger import JSONFormatter, setup_logging


def make_record(msg="Upload failed", exc_info=None, **extra):
    record = logging.LogRecord(
        name="services.lifecycle",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_basic_fields():
    data = json.loads(JSONFormatter().format(make_record()))

    assert data["level"] == "ERROR"
    assert data["logger"] == "services.lifecycle"
    assert data["message"] == "Upload failed"
    assert data["timestamp"].endswith("Z")


def test_json_formatter_includes_extra_fields():
    data = json.loads(JSONFormatter().format(make_record(error_code="HTTP_ERROR")))
    assert data["error_code"] == "HTTP_ERROR"


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())

    data = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: boom" in data["exception"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_replaces_handlers(restore_root_logger):
    root = restore_root_logger

    setup_logging("DEBUG")

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
