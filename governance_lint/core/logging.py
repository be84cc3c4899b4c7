"""
Structured Logging
==================

Logging setup for the governance linter.

Features:
- Colored console output for local runs
- JSON-formatted output for CI log collectors
- Context propagation (current file / record id) across a pass
- Timing for validation passes

Log output always goes to stderr so that reports written to stdout
(including ``--format=json``) stay machine readable.
"""

import contextvars
import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone
from typing import Any

_context_data: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "context_data", default=None
)

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for CI log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context_data = _context_data.get()
        if context_data:
            log_entry["context"] = context_data

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": "".join(traceback.format_exception(*record.exc_info)),
            }

        for key in ("duration_ms", "error_code", "component", "record_count"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        log_entry["location"] = f"{record.filename}:{record.lineno}"

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with colors.

    Colors are dropped when the stream is not a terminal.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output."""
        if self.use_color:
            color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
        else:
            color = reset = ""

        context_data = _context_data.get() or {}
        context_parts = []
        if context_data.get("record_id"):
            context_parts.append(f"[{context_data['record_id']}]")
        elif context_data.get("file"):
            context_parts.append(f"[{context_data['file']}]")

        context_str = " ".join(context_parts)
        if context_str:
            context_str = f" {context_str}"

        message = record.getMessage()
        if hasattr(record, "duration_ms"):
            message += f" ({record.duration_ms:.1f}ms)"

        return f"{color}{record.levelname:8}{reset}{context_str} {record.name}: {message}"


def configure_logging(
    level: int = logging.WARNING,
    structured: bool = False,
) -> None:
    """
    Configure the root logger for a CLI run.

    Args:
        level: Minimum log level
        structured: Use JSON format (for CI)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if structured:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = ConsoleFormatter(use_color=sys.stderr.isatty())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def resolve_log_level(name: str | None, verbose: bool = False) -> int:
    """Map a level name (or the --verbose flag) to a logging level."""
    if verbose:
        return logging.DEBUG
    if not name:
        return logging.WARNING
    return LOG_LEVELS.get(name.lower(), logging.WARNING)


def clear_log_context() -> None:
    """Clear all context data."""
    _context_data.set(None)


def log_context(**kwargs: Any):
    """
    Context manager for temporarily adding log context.

    Usage:
        with log_context(file="roads/ROAD-001.md", record_id="ROAD-001"):
            logger.debug("Validating")
    """

    class LogContextManager:
        def __init__(self, context: dict[str, Any]):
            self.context = context
            self.previous: dict[str, Any] = {}

        def __enter__(self):
            self.previous = (_context_data.get() or {}).copy()
            current = self.previous.copy()
            current.update(self.context)
            _context_data.set(current)
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            _context_data.set(self.previous)
            return False

    return LogContextManager(kwargs)


class Timer:
    """
    Context manager for timing a validation pass.

    Usage:
        with Timer("roads") as timer:
            results = linter.lint_all_roads()
        logger.debug("Pass finished", extra={"duration_ms": timer.duration_ms})
    """

    def __init__(self, name: str = "operation"):
        self.name = name
        self.start_time: float = 0
        self.end_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.end_time = time.perf_counter()
        self.duration_ms = (self.end_time - self.start_time) * 1000
        return False


def log_exception(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    level: int = logging.ERROR,
    **extra: Any,
) -> None:
    """
    Log an exception with its error code.

    Args:
        logger: Logger instance
        message: Error message
        exc: Exception to log
        level: Log level
        **extra: Additional record attributes
    """
    from .exceptions import get_error_code

    logger.log(
        level,
        message,
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={
            "error_code": get_error_code(exc),
            **extra,
        },
    )
