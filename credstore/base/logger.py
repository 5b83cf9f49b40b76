"""
Structured logging for Credstore.

Provides a pre-configured logger that emits JSON-structured log records
with invocation context (command, secret, operation) on stderr. Stdout is
reserved for the credential helper protocol, and secret values are never
passed to the logger.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via CredstoreLogger.log_operation
        for key in ("request_id", "command", "secret_id", "operation"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class CredstoreLogger:
    """Convenience wrapper around :mod:`logging` for credential helper operations."""

    def __init__(self, name: str = "credstore") -> None:
        self.logger = logging.getLogger(name)
        self.request_id = uuid.uuid4().hex[:12]
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.WARNING)

    def set_level(self, level: str | int) -> None:
        """Change the threshold, accepting names such as ``"DEBUG"``."""
        self.logger.setLevel(level)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        command: str | None = None,
        secret_id: str | None = None,
        operation: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with invocation context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            command: Helper command being served (e.g. 'store').
            secret_id: Secret holding the credential map.
            operation: Secret store call (e.g. 'put_secret').
            request_id: Optional correlation ID; defaults to one per process.
            exc_info: Whether to include exception info.
        """
        extra = {
            "command": command,
            "secret_id": secret_id,
            "operation": operation,
            "request_id": request_id or self.request_id,
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
cs_logger = CredstoreLogger()
