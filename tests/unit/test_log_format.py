"""Unit tests for checkmate.log_format."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from checkmate.config import load_settings
from checkmate.log_format import PACKAGE_LOGGER, JSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def _restore_package_logger():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


def _record(msg: str = "hello %s", args: tuple = ("world",), **kwargs) -> logging.LogRecord:
    return logging.LogRecord(
        name="checkmate.checks.engine",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=kwargs.get("exc_info"),
    )


class TestJSONFormatter:
    def test_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "checkmate.checks.engine"
        assert payload["message"] == "hello world"
        assert "timestamp" in payload
        assert "exc_info" not in payload

    def test_single_line(self):
        assert "\n" not in JSONFormatter().format(_record("multi\nline", ()))

    def test_exception_included(self):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: kaboom" in payload["exc_info"]

    def test_run_context_included(self):
        record = _record()
        record.checkset = "orders"
        record.check = "positive amount"
        payload = json.loads(JSONFormatter().format(record))
        assert payload["checkset"] == "orders"
        assert payload["check"] == "positive amount"

    def test_run_context_omitted_when_absent(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert "checkset" not in payload
        assert "check" not in payload

    def test_worker_thread_included(self):
        record = _record()
        record.threadName = "checkmate_0"
        assert json.loads(JSONFormatter().format(record))["thread"] == "checkmate_0"

    def test_other_threads_omitted(self):
        record = _record()
        record.threadName = "MainThread"
        assert "thread" not in json.loads(JSONFormatter().format(record))


class TestConfigureLogging:
    def test_structured(self):
        logger = configure_logging(load_settings(structured_logging=True, log_level="INFO"))
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_plain_text(self):
        logger = configure_logging(load_settings(structured_logging=False))
        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_idempotent(self):
        configure_logging(load_settings())
        logger = configure_logging(load_settings())
        assert len(logger.handlers) == 1

    def test_json_output(self, capsys):
        configure_logging(load_settings(structured_logging=True, log_level="INFO"))
        logging.getLogger("checkmate.checks.engine").info("ran %d checks", 2)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        assert json.loads(line)["message"] == "ran 2 checks"
