r"""Structured logging utilities for machine-readable log output.

The executors log every failed attempt, wait and final outcome at DEBUG
level on the ``aretry`` logger hierarchy, with the ``attempt``,
``max_attempts`` and ``wait_time`` values attached as record
attributes. This module provides a JSON formatter exposing those
attributes and a correlation id stored in a context variable, so that
the log lines of one retry call can be grouped by a log aggregator.

Example:
    ```python
    import logging
    from aretry.utils.structured_logging import configure_logging, set_correlation_id

    configure_logging(logging.DEBUG, structured=True)
    set_correlation_id("job-42")
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]

import contextvars
import json
import logging
from datetime import datetime, timezone
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "aretry_correlation_id", default=None
)

# Attributes present on every LogRecord; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_correlation_id() -> str | None:
    """Get the correlation ID of the current context.

    Returns:
        The current correlation ID, or None if not set.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    The value is stored in a context variable, so each thread and each
    asyncio task sees its own correlation ID.

    Args:
        correlation_id: The correlation ID (e.g., job ID, trace ID).

    Example:
        ```pycon
        >>> from aretry.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("job-1")
        >>> get_correlation_id()
        'job-1'
        >>> clear_correlation_id()
        >>> get_correlation_id() is None
        True

        ```
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record is rendered as one JSON object with the fields
    ``timestamp`` (ISO 8601, UTC), ``level``, ``logger``, ``message``,
    ``module``, ``function`` and ``line``, plus ``correlation_id`` when
    set, ``exception`` when the record carries exception info, and any
    attribute passed through ``extra``. Values that are not JSON
    serializable are rendered with ``repr``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from aretry.utils.structured_logging import StructuredFormatter
        >>> record = logging.makeLogRecord(
        ...     {"name": "aretry", "msg": "retrying", "levelname": "DEBUG", "attempt": 2}
        ... )
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["message"], data["attempt"]
        ('retrying', 2)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=repr)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the record creation time as an ISO 8601 UTC timestamp."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            return timestamp.strftime(datefmt)
        return timestamp.isoformat()


def configure_logging(
    level: int = logging.INFO,
    structured: bool = False,
    logger_name: str = "aretry",
) -> logging.Handler:
    """Attach a stream handler to the aretry logger.

    Args:
        level: The level of the logger and the handler.
        structured: If ``True``, log records are formatted as JSON with
            ``StructuredFormatter``.
        logger_name: The logger to configure.

    Returns:
        The handler that was added, so that it can be removed later.
    """
    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler.setLevel(level)
    logger = logging.getLogger(logger_name)
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
