"""Tests for JSON logging and operation instrumentation."""

import io
import json
import logging

import pytest

from gridfile.logging_config import JSONFormatter, configure_logging, log_grid_operation


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Single-line JSON output."""

    def test_basic_fields(self):
        record = logging.LogRecord("gridfile.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "gridfile.test"
        assert data["message"] == "hello world"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        record = logging.LogRecord("gridfile.test", logging.INFO, __file__, 1, "msg", (), None)
        record.operation = "write"
        record.size_bytes = 12
        record.unrelated = "dropped"

        data = json.loads(JSONFormatter().format(record))

        assert data["operation"] == "write"
        assert data["size_bytes"] == 12
        assert "unrelated" not in data

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = logging.LogRecord("gridfile.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in data["exception"]


class TestConfigureLogging:
    """Root logger setup."""

    def test_json_to_stream(self, restore_root_logger):
        stream = io.StringIO()
        configure_logging(json_format=True, level="debug", stream=stream)

        logging.getLogger("gridfile.test").debug("configured")

        assert json.loads(stream.getvalue())["message"] == "configured"
        assert logging.getLogger("pymongo").level == logging.WARNING

    def test_plain_text(self, restore_root_logger):
        stream = io.StringIO()
        configure_logging(json_format=False, level="INFO", stream=stream)

        logging.getLogger("gridfile.test").info("plain")

        assert "[INFO] gridfile.test: plain" in stream.getvalue()


class TestLogGridOperation:
    """Timing and outcome records."""

    def test_success(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gridfile.operations"):
            with log_grid_operation("write", "a.txt") as metrics:
                metrics["size_bytes"] = 5
                metrics["file_id"] = "abc"

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.event == "grid_write_complete"
        assert record.target == "a.txt"
        assert record.size_bytes == 5
        assert record.file_id == "abc"
        assert record.duration_ms >= 0

    def test_failure_is_logged_and_reraised(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gridfile.operations"):
            with pytest.raises(LookupError):
                with log_grid_operation("read", "missing.txt"):
                    raise LookupError("No match!")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.event == "grid_read_failed"
        assert "No match!" in record.getMessage()
