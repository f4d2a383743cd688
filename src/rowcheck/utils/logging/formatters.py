"""
Custom log formatters for structured and console logging.

Provides a JSON formatter for structured logs and a console formatter with
color support. Records emitted for assertion outcomes carry a
``message_type`` attribute (NOTE, WARNING or ERROR) which the console
formatter shows in place of the logging level name.
"""

import json
import logging
import os
import sys
import traceback
from datetime import UTC, datetime

# LogRecord attributes that are never treated as extra context
SKIP_FIELDS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "asctime",
})


def _extra_context(record: logging.LogRecord) -> dict:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in SKIP_FIELDS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging

    Outputs log records as JSON with standard fields plus any extra context.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_hostname: bool = True,
        app_name: str = "rowcheck",
    ):
        """
        Initialize JSON formatter

        Args:
            include_timestamp: Include ISO8601 timestamp
            include_hostname: Include hostname in log records
            app_name: Application name to include in logs
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_hostname = include_hostname
        self.app_name = app_name
        self.hostname = os.uname().nodename if include_hostname else None

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "app": self.app_name,
        }

        if self.include_timestamp:
            log_data["timestamp"] = datetime.fromtimestamp(
                record.created, UTC
            ).isoformat()

        if self.include_hostname and self.hostname:
            log_data["hostname"] = self.hostname

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra_data = _extra_context(record)
        if extra_data:
            log_data["context"] = extra_data

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with colors

    Assertion messages are rendered as ``NOTE: ...``, ``WARNING: ...`` or
    ``ERROR: ...``; other records use the usual timestamped layout.
    """

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "NOTE": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        """
        Initialize console formatter

        Args:
            use_colors: Whether to use ANSI color codes (only on a TTY)
        """
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def _colorize(self, label: str) -> str:
        if self.use_colors and label in self.COLORS:
            return f"{self.COLORS[label]}{label}{self.RESET}"
        return label

    def format(self, record: logging.LogRecord) -> str:
        message_type = getattr(record, "message_type", None)
        if message_type:
            return f"{self._colorize(str(message_type))}: {record.getMessage()}"

        original_levelname = record.levelname
        record.levelname = self._colorize(original_levelname)
        try:
            formatted = super().format(record)
        finally:
            record.levelname = original_levelname

        extra_items = [f"{key}={value}" for key, value in _extra_context(record).items()]
        if extra_items:
            formatted += f" [{', '.join(extra_items)}]"

        return formatted
