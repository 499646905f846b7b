r"""Callback types and data structures for observability.

This module provides callback support for the aretry library, enabling
users to hook into the retry lifecycle for logging, metrics and alerting.

The callback system provides five lifecycle hooks:
- on_attempt: Called before each attempt
- on_retry: Called after a failed attempt, before waiting
- on_success: Called when an attempt succeeds
- on_failure: Called when all attempts are exhausted
- on_cancel: Called when the retry call is cancelled

All attempt numbers passed to callbacks are 1-indexed.

Example:
    ```pycon
    >>> from aretry import retry_call
    >>> from aretry.callbacks import CallbackConfig, RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"attempt {info.attempt} failed, waiting {info.wait_time}s")
    ...
    >>> outcome = retry_call(fetch, callbacks=CallbackConfig(on_retry=log_retry))  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptInfo",
    "CallbackConfig",
    "CancelInfo",
    "FailureInfo",
    "RetryInfo",
    "SuccessInfo",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class AttemptInfo:
    """Information passed to on_attempt callback.

    Attributes:
        operation: The name of the operation being retried.
        attempt: The attempt about to start (1-indexed).
        max_attempts: The attempt budget, or ``None`` if unbounded.
    """

    operation: str
    attempt: int
    max_attempts: int | None


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        operation: The name of the operation being retried.
        attempt: The attempt that just failed (1-indexed).
        max_attempts: The attempt budget, or ``None`` if unbounded.
        wait_time: The delay in seconds before the next attempt.
        error: The exception raised by the failed attempt.
    """

    operation: str
    attempt: int
    max_attempts: int | None
    wait_time: float
    error: Exception


@dataclass
class SuccessInfo:
    """Information passed to on_success callback.

    Attributes:
        operation: The name of the operation.
        attempt: The attempt that succeeded (1-indexed).
        max_attempts: The attempt budget, or ``None`` if unbounded.
        value: The value returned by the operation.
        total_time: Total time spent on all attempts including waits (seconds).
    """

    operation: str
    attempt: int
    max_attempts: int | None
    value: Any
    total_time: float


@dataclass
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        operation: The name of the operation.
        attempt: The final attempt number (1-indexed).
        max_attempts: The attempt budget.
        error: The exception raised by the final attempt.
        total_time: Total time spent on all attempts including waits (seconds).
    """

    operation: str
    attempt: int
    max_attempts: int | None
    error: Exception
    total_time: float


@dataclass
class CancelInfo:
    """Information passed to on_cancel callback.

    Attributes:
        operation: The name of the operation.
        attempts: The number of attempts made before cancellation.
        max_attempts: The attempt budget, or ``None`` if unbounded.
        error: The exception raised by the last attempt, if any.
        total_time: Total time spent before cancellation (seconds).
    """

    operation: str
    attempts: int
    max_attempts: int | None
    error: Exception | None
    total_time: float


@dataclass
class CallbackConfig:
    """Configuration for callbacks.

    Attributes:
        on_attempt: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked after each failed attempt
            that will be retried.
        on_success: Optional callback invoked when an attempt succeeds.
        on_failure: Optional callback invoked when all attempts are exhausted.
        on_cancel: Optional callback invoked when the call is cancelled.
    """

    on_attempt: Callable[[AttemptInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[SuccessInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None
    on_cancel: Callable[[CancelInfo], None] | None = None
