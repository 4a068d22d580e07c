"""SimAgent logging: JSON records for files, colored lines for the console.

Every module logs through ``get_logger(<module>)`` below the ``simagent``
logger. Launch-wide fields (test suite, public address) are attached with
``set_launch_context``; per-worker fields travel as ``extra=`` on the record.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "simagent"
LOG_FILE_NAME = "simagent.log"

# Record attributes copied into JSON output when a caller passes them via extra=
WORKER_FIELDS = ("worker_id", "role", "test_suite_id", "pid")

_launch_context: dict[str, Any] = {}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, merged with the launch context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        payload.update(_launch_context)
        payload.update({field: getattr(record, field) for field in WORKER_FIELDS if hasattr(record, field)})

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Short colored lines: time, level, ``[suite:worker]`` and the message."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        when = self.formatTime(record, "%H:%M:%S")
        prefix = self._context_prefix(record)
        return f"{color}{when} {record.levelname:8s}{self.RESET} {prefix}{record.getMessage()}"

    @staticmethod
    def _context_prefix(record: logging.LogRecord) -> str:
        labels = [str(_launch_context["test_suite_id"])] if "test_suite_id" in _launch_context else []
        if hasattr(record, "worker_id"):
            labels.append(str(record.worker_id))
        return f"[{':'.join(labels)}] " if labels else ""


def set_launch_context(
    test_suite_id: str | None = None,
    public_address: str | None = None,
    **kwargs: Any,
) -> None:
    """Replace the fields attached to every subsequent JSON record.

    Args:
        test_suite_id: Test suite the launched workers belong to
        public_address: Public address of this agent's host
        **kwargs: Further fields, e.g. ``agent_index``
    """
    global _launch_context
    fields = {"test_suite_id": test_suite_id, "public_address": public_address, **kwargs}
    _launch_context = {key: value for key, value in fields.items() if value is not None}


def clear_launch_context() -> None:
    """Drop all launch context fields."""
    global _launch_context
    _launch_context = {}


def get_logger(name: str) -> logging.Logger:
    """Return the ``simagent.<name>`` logger."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def _resolve_level(level: str) -> int:
    name = "WARNING" if level.lower() == "warn" else level.upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(
    level: str = "info",
    log_dir: str | Path | None = None,
    json_output: bool = True,
    console_output: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Configure the ``simagent`` logger tree.

    Args:
        level: Log level (debug, info, warn, error)
        log_dir: Directory for ``simagent.log``; no file output without it
        json_output: Write JSON records to the log file
        console_output: Write colored lines to stderr
        max_bytes: Size at which the log file is rotated
        backup_count: Number of rotated files to keep
    """
    log_level = _resolve_level(level)

    handlers: list[logging.Handler] = []
    if console_output:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ConsoleFormatter())
        handlers.append(console)

    if log_dir and json_output:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(directory / LOG_FILE_NAME, maxBytes=max_bytes, backupCount=backup_count)
        rotating.setFormatter(JsonFormatter())
        handlers.append(rotating)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(log_level)
    root.handlers = []
    for handler in handlers:
        handler.setLevel(log_level)
        root.addHandler(handler)

    # Records stay inside the simagent tree
    root.propagate = False


setup_logging(console_output=True, json_output=False)
