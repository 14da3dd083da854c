# gridfile/logging_config.py
"""
Structured JSON logging for registry operations.

Provides a JSON formatter, a one-call logging setup, and a context manager
that times GridFS operations and records their outcome.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone

# Extra fields copied from log records into the JSON payload
EXTRA_FIELDS = (
    "event",
    "operation",
    "target",
    "file_id",
    "duration_ms",
    "size_bytes",
)


# -----------------------------------------------------------------------------
# JSON Formatter
# -----------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON.

    Output format:
    {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...", "operation": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def configure_logging(json_format: bool = True, level: str = "INFO", stream=None) -> None:
    """
    Configure root logging.

    Args:
        json_format: If True, use JSON format. If False, use human-readable format.
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream (default: stdout)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root_logger.addHandler(handler)

    # Reduce noise from the driver
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# -----------------------------------------------------------------------------
# Context Managers
# -----------------------------------------------------------------------------


@contextmanager
def log_grid_operation(operation: str, target: str):
    """
    Context manager for GridFS operation instrumentation.

    Logs the outcome with timing and size. The yielded dict can be filled
    with "size_bytes" and "file_id" by the caller.

    Usage:
        with log_grid_operation("write", "report.pdf") as metrics:
            record = await engine.upload(chunks, options)
            metrics["size_bytes"] = record.length
            metrics["file_id"] = record.id
    """
    start_time = time.time()
    logger = logging.getLogger("gridfile.operations")
    metrics: dict = {"size_bytes": 0, "file_id": None}

    try:
        yield metrics

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"GridFS {operation} completed: {target} ({metrics['size_bytes']} bytes, {duration_ms}ms)",
            extra={
                "event": f"grid_{operation}_complete",
                "operation": operation,
                "target": target,
                "file_id": str(metrics["file_id"]) if metrics["file_id"] is not None else None,
                "duration_ms": duration_ms,
                "size_bytes": metrics["size_bytes"],
            },
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.warning(
            f"GridFS {operation} failed: {target} - {e}",
            extra={
                "event": f"grid_{operation}_failed",
                "operation": operation,
                "target": target,
                "duration_ms": duration_ms,
            },
        )
        raise
