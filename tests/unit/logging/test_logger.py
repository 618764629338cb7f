# tests/unit/logging/test_logger.py - v2
"""Tests for logging/logger.py - formatters and setup."""

from __future__ import annotations

import json
import logging
import sys

from docsync.logging.context import clear_context, request_context
from docsync.logging.logger import ROOT_LOGGER, JsonFormatter, TextFormatter, setup_logging


def _record(msg: str = "Hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="docsync.test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert parsed["logger"] == "docsync.test"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_request_context(self):
        with request_context("translate", "src/app.ts", "fr") as request_id:
            parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["context"]["operation"] == "translate"
        assert parsed["context"]["file_path"] == "src/app.ts"
        assert parsed["context"]["language"] == "fr"
        assert parsed["context"]["request_id"] == request_id

    def test_format_with_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        parsed = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in parsed["exception"]


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_context(self):
        with request_context("generate", "src/app.ts"):
            output = TextFormatter().format(_record())
        assert "[generate]" in output
        assert "(src/app.ts)" in output

    def test_format_with_language(self):
        with request_context("translate", "src/app.ts", "de"):
            output = TextFormatter().format(_record())
        assert "(src/app.ts@de)" in output


class TestSetupLogging:
    def teardown_method(self):
        logging.getLogger(ROOT_LOGGER).handlers.clear()

    def test_setup_json(self):
        root = setup_logging(level="DEBUG", log_format="json")
        assert root.name == ROOT_LOGGER
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        root = setup_logging(level="INFO", log_format="text")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_reinit_does_not_duplicate_handlers(self):
        setup_logging()
        root = setup_logging()
        assert len(root.handlers) == 1

    def test_with_log_file(self, tmp_path):
        root = setup_logging(log_file=tmp_path / "logs" / "docsync.log", rotation="1KB")
        assert len(root.handlers) == 2
        for handler in root.handlers:
            handler.close()

    def test_quiets_httpx(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
