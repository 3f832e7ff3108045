"""Tests for the structured logging setup."""

import io
import logging
import sys

import pytest

from symcalc_pkg import logging_config
from symcalc_pkg.logging_config import StructuredFormatter, get_logger, setup_logging


def test_get_logger_is_namespaced():
    assert get_logger("parser").name == "symcalc.parser"


def test_setup_logging_replaces_handlers(tmp_path):
    log_file = tmp_path / "symcalc.log"
    logger = setup_logging(level="DEBUG")
    logger = setup_logging(level="debug", log_file=str(log_file))
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    get_logger("test").debug("hello %s", "file")
    for handler in logger.handlers:
        handler.flush()
    assert "[DEBUG] symcalc.test: hello file" in log_file.read_text()
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_formatter_includes_exception():
    formatter = StructuredFormatter()
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord(
            "symcalc.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )
    text = formatter.format(record)
    assert "[ERROR] symcalc.test: failed" in text
    assert "ValueError: bad" in text


def test_setup_logging_writes_to_stream():
    stream = io.StringIO()
    logger = setup_logging(level="INFO", stream=stream)
    get_logger("calculator").info("set %s", "x")
    get_logger("calculator").debug("hidden")
    assert "[INFO] symcalc.calculator: set x" in stream.getvalue()
    assert "hidden" not in stream.getvalue()
    logger.handlers.clear()


def test_setup_logging_default_level(monkeypatch):
    monkeypatch.setattr(logging_config, "LOG_LEVEL", "WARNING")
    logger = setup_logging(stream=io.StringIO())
    assert logger.level == logging.WARNING
    logger.handlers.clear()


def test_replaced_handlers_are_closed(tmp_path):
    logger = setup_logging(level="INFO", log_file=str(tmp_path / "first.log"))
    file_handler = logger.handlers[1]
    setup_logging(level="INFO", stream=io.StringIO())
    assert file_handler not in logger.handlers
    assert file_handler.stream is None
    logger.handlers.clear()


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        setup_logging(level="LOUD")
