"""Structured logging for the storefront handlers.

This module provides structured logging functions on top of the standard
``logging`` module. Every record is emitted as one JSON object per line,
carrying the message, level, timestamp and any structured fields.

Example:
    >>> from storefront import configure_logging, log_info, log_error
    >>>
    >>> configure_logging("debug")
    >>> log_info("Order created", {"orderId": "o1"})
    >>>
    >>> try:
    ...     store.put(record)
    ... except CollaboratorError as e:
    ...     log_error("Error creating order", {
    ...         "action": "createOrder",
    ...         "error_type": type(e).__name__,
    ...     })
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .types import LogContext

LOGGER_NAME = "storefront"
TRACE = 5

logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Request fields that must never reach the logs.
REDACTED_FIELDS = frozenset({"password"})

# Keys owned by the formatter; caller fields with these names go under "fields".
RESERVED_KEYS = frozenset({"timestamp", "level", "logger", "message", "exception", "fields"})

_logger = logging.getLogger(LOGGER_NAME)


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None) or {}
        clashing = {k: v for k, v in fields.items() if k in RESERVED_KEYS}
        payload.update((k, v) for k, v in fields.items() if k not in RESERVED_KEYS)
        if clashing:
            payload["fields"] = clashing
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "info", stream: Any = None) -> logging.Logger:
    """Install the JSON handler on the ``storefront`` logger.

    Safe to call more than once; the previous handler is replaced.

    Args:
        level: One of trace, debug, info, warn, error.
        stream: Output stream (default: stdout).

    Returns:
        The configured logger.
    """
    for handler in list(_logger.handlers):
        if getattr(handler, "_storefront", False):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler._storefront = True  # type: ignore[attr-defined]
    _logger.addHandler(handler)
    _logger.setLevel(_LEVELS.get(level.lower(), logging.INFO))
    _logger.propagate = False
    return _logger


def redact(data: Any) -> Any:
    """Return a copy of ``data`` with sensitive fields masked.

    Example:
        >>> redact({"userId": "u1", "password": "secret"})
        {'userId': 'u1', 'password': '***'}
    """
    if isinstance(data, dict):
        return {k: ("***" if k in REDACTED_FIELDS else redact(v)) for k, v in data.items()}
    if isinstance(data, list):
        return [redact(v) for v in data]
    return data


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Use this for failed collaborator calls and rejected requests.

    Args:
        message: The log message.
        fields: Optional structured fields for context. Can be a dict
                or a LogContext instance.
    """
    _log(logging.ERROR, message, fields)


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(logging.WARNING, message, fields)


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(logging.INFO, message, fields)


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields."""
    _log(logging.DEBUG, message, fields)


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    This level is typically disabled in production.
    """
    _log(TRACE, message, fields)


def _log(level: int, message: str, fields: dict[str, Any] | LogContext | None) -> None:
    if not _logger.isEnabledFor(level):
        return
    _logger.log(level, message, extra={"fields": _normalize_fields(fields)})


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, Any] | None:
    """Normalize fields to a plain, redacted dict.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict of fields, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        return {k: v for k, v in fields.model_dump().items() if v is not None}

    return redact(dict(fields))


__all__ = [
    "configure_logging",
    "redact",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
    "JsonFormatter",
]
