r"""Shared core logic for retry executors.

This module provides helper functions used by both the synchronous and
asynchronous retry executors. They encapsulate the bookkeeping done when
a retry call ends: logging, callback invocation and outcome creation.
"""

from __future__ import annotations

__all__ = [
    "finish_cancelled",
    "finish_failure",
    "finish_success",
    "log_retry",
    "operation_name",
]

import functools
import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar

from aretry.outcome import Cancelled, Failure, Success

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.retry.manager import CallbackManager

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


def operation_name(operation: Callable[..., Any]) -> str:
    """Return a readable name for an operation, used in logs and callbacks.

    Args:
        operation: The operation to name.

    Returns:
        The qualified name of the operation, or its ``repr`` when it has
        none.

    Example:
        ```pycon
        >>> from aretry.retry.executor_core import operation_name
        >>> def fetch():
        ...     pass
        ...
        >>> operation_name(fetch)
        'fetch'

        ```
    """
    while isinstance(operation, functools.partial):
        operation = operation.func
    return getattr(operation, "__qualname__", None) or repr(operation)


def _budget(max_attempts: int | None) -> str:
    return "inf" if max_attempts is None else str(max_attempts)


def log_retry(
    name: str, attempt: int, max_attempts: int | None, wait_time: float, error: Exception
) -> None:
    """Log a failed attempt that will be retried.

    Args:
        name: The operation name.
        attempt: The failed attempt (1-indexed).
        max_attempts: The attempt budget, or ``None`` if unbounded.
        wait_time: The delay before the next attempt.
        error: The exception raised by the attempt.
    """
    logger.debug(
        f"{name}: attempt {attempt}/{_budget(max_attempts)} failed ({error!r}), "
        f"retrying in {wait_time:.2f}s",
        extra={"attempt": attempt, "max_attempts": max_attempts, "wait_time": wait_time},
    )


def finish_success(
    callbacks: CallbackManager, name: str, attempt: int, value: T, start_time: float
) -> Success[T]:
    """Create the outcome of a successful attempt.

    Args:
        callbacks: The callback manager of the executor.
        name: The operation name.
        attempt: The attempt that succeeded (1-indexed).
        value: The value returned by the operation.
        start_time: The ``time.monotonic()`` value when the call started.

    Returns:
        The ``Success`` outcome.
    """
    logger.debug(f"{name}: succeeded on attempt {attempt}", extra={"attempt": attempt})
    callbacks.on_success(name, attempt, value, start_time)
    return Success(value=value, attempts=attempt, elapsed=time.monotonic() - start_time)


def finish_failure(
    callbacks: CallbackManager, name: str, attempt: int, error: Exception, start_time: float
) -> Failure:
    """Create the outcome of an exhausted attempt budget.

    Args:
        callbacks: The callback manager of the executor.
        name: The operation name.
        attempt: The final attempt (1-indexed).
        error: The exception raised by the final attempt.
        start_time: The ``time.monotonic()`` value when the call started.

    Returns:
        The ``Failure`` outcome.
    """
    logger.debug(
        f"{name}: giving up after {attempt} attempt(s), last error: {error!r}",
        extra={"attempt": attempt},
    )
    callbacks.on_failure(name, attempt, error, start_time)
    return Failure(last_error=error, attempts=attempt, elapsed=time.monotonic() - start_time)


def finish_cancelled(
    callbacks: CallbackManager,
    name: str,
    attempts: int,
    error: Exception | None,
    start_time: float,
) -> Cancelled:
    """Create the outcome of a cancelled retry call.

    Args:
        callbacks: The callback manager of the executor.
        name: The operation name.
        attempts: The number of attempts made before cancellation.
        error: The exception raised by the last attempt, if any.
        start_time: The ``time.monotonic()`` value when the call started.

    Returns:
        The ``Cancelled`` outcome.
    """
    logger.debug(f"{name}: cancelled after {attempts} attempt(s)", extra={"attempt": attempts})
    callbacks.on_cancel(name, attempts, error, start_time)
    return Cancelled(attempts=attempts, last_error=error, elapsed=time.monotonic() - start_time)
