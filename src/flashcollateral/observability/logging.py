"""
Logging — Structured logging with run ID propagation.

Provides consistent logging across all flashcollateral components with
run ID tracking, so every line emitted while a strategy run is in flight
can be tied back to that run.
"""

import logging
import json
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


# Context variable for run ID
_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)


def set_run_id(run_id: UUID | str | None) -> None:
    """Set run ID for current context."""
    _run_id.set(str(run_id) if run_id else None)


def get_run_id() -> str | None:
    """Get run ID from current context."""
    return _run_id.get()


class RunIdFilter(logging.Filter):
    """Adds run_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON for structured logging.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", None),
        }

        # Event arguments attached via extra={"extra_data": {...}}
        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ReadableFormatter(logging.Formatter):
    """
    Human-readable formatter for development.
    """

    def format(self, record: logging.LogRecord) -> str:
        run_id = getattr(record, "run_id", "-")
        run_short = run_id[:8] if run_id and run_id != "-" else "-"

        base = f"{record.levelname:<7} [{run_short}] {record.name}: {record.getMessage()}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    stream: Any = None,
) -> None:
    """
    Configure flashcollateral logging.

    Args:
        level: Logging level
        json_format: Use JSON format (for production)
        stream: Output stream (default: stderr)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(RunIdFilter())

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ReadableFormatter())

    root = logging.getLogger("flashcollateral")
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a flashcollateral component."""
    return logging.getLogger(f"flashcollateral.{name}")


class LogContext:
    """
    Context manager for logging with run ID.

    Usage:
        with LogContext(run_id):
            logger.info("Borrowing...")  # Includes run_id
    """

    def __init__(self, run_id: UUID | str | None):
        self.run_id = run_id
        self._token = None

    def __enter__(self):
        self._token = _run_id.set(
            str(self.run_id) if self.run_id else None
        )
        return self

    def __exit__(self, *args):
        if self._token is not None:
            _run_id.reset(self._token)
