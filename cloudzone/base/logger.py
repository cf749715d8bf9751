"""
Structured logging for Cloudzone.

Provides a logger wrapper that emits JSON-structured log records with
request context (provider, zone, operation) on stderr, so structured
command output on stdout stays parseable.  Instances are created by the
caller and passed into each engine component; verbosity is the level of
the instance, not process-global state.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from typing import Any, TextIO


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via CloudzoneLogger.log_operation
        for key in ("request_id", "provider", "zone", "operation"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class CloudzoneLogger:
    """Convenience wrapper around :mod:`logging` for DNS engine operations.

    Args:
        name: Logger name.
        level: Initial level; ``logging.WARNING`` keeps progress quiet.
        stream: Handler stream, defaults to ``sys.stderr``.
        request_id: Correlation ID shared by every record this instance
            emits; auto-generated if omitted.
    """

    def __init__(
        self,
        name: str = "cloudzone",
        level: int = logging.INFO,
        stream: TextIO | None = None,
        request_id: str | None = None,
    ) -> None:
        # Unregistered logger: level and handler belong to this instance only
        self.logger = logging.Logger(name, level)
        self.logger.propagate = False
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        self.logger.addHandler(handler)
        self.request_id = request_id or uuid.uuid4().hex[:12]

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        provider: str | None = None,
        zone: str | None = None,
        operation: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with DNS operation context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            provider: Backend provider name.
            zone: Zone domain or identifier.
            operation: Operation name (e.g. 'submit_changes').
            exc_info: Whether to include exception info.
        """
        extra = {
            "provider": provider,
            "zone": zone,
            "operation": operation,
            "request_id": self.request_id,
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def progress(self, message: str, **kwargs: Any) -> None:
        """Report waiter progress; shown at the default ``INFO`` level."""
        self.log_operation(logging.INFO, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


def quiet_logger() -> CloudzoneLogger:
    """A logger for library callers that did not pass one; warnings and up only."""
    return CloudzoneLogger("cloudzone.library", level=logging.WARNING)
