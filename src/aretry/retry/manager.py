r"""Callback manager for orchestrating retry lifecycle events.

This module provides the CallbackManager class that handles invocation
of user-defined callbacks at various points in the retry lifecycle.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time
from typing import TYPE_CHECKING, Any

from aretry.callbacks import (
    AttemptInfo,
    CallbackConfig,
    CancelInfo,
    FailureInfo,
    RetryInfo,
    SuccessInfo,
)

if TYPE_CHECKING:
    from aretry.policy import RetryPolicy


class CallbackManager:
    """Manages callback invocations during the retry lifecycle.

    Exceptions raised by callbacks are not caught: a failing callback is
    a programming error and propagates to the caller of the executor.

    Args:
        callbacks: Callback configuration. Defaults to no callbacks.
        policy: The policy whose attempt budget is reported.

    Attributes:
        callbacks: Configuration containing callback functions for lifecycle events.
    """

    def __init__(self, callbacks: CallbackConfig | None, policy: RetryPolicy) -> None:
        self.callbacks = callbacks if callbacks is not None else CallbackConfig()
        self._max_attempts = policy.max_attempts

    def on_attempt(self, operation: str, attempt: int) -> None:
        if self.callbacks.on_attempt is not None:
            self.callbacks.on_attempt(
                AttemptInfo(operation=operation, attempt=attempt, max_attempts=self._max_attempts)
            )

    def on_retry(self, operation: str, attempt: int, wait_time: float, error: Exception) -> None:
        if self.callbacks.on_retry is not None:
            self.callbacks.on_retry(
                RetryInfo(
                    operation=operation,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    wait_time=wait_time,
                    error=error,
                )
            )

    def on_success(self, operation: str, attempt: int, value: Any, start_time: float) -> None:
        if self.callbacks.on_success is not None:
            self.callbacks.on_success(
                SuccessInfo(
                    operation=operation,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    value=value,
                    total_time=time.monotonic() - start_time,
                )
            )

    def on_failure(self, operation: str, attempt: int, error: Exception, start_time: float) -> None:
        if self.callbacks.on_failure is not None:
            self.callbacks.on_failure(
                FailureInfo(
                    operation=operation,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error=error,
                    total_time=time.monotonic() - start_time,
                )
            )

    def on_cancel(
        self, operation: str, attempts: int, error: Exception | None, start_time: float
    ) -> None:
        if self.callbacks.on_cancel is not None:
            self.callbacks.on_cancel(
                CancelInfo(
                    operation=operation,
                    attempts=attempts,
                    max_attempts=self._max_attempts,
                    error=error,
                    total_time=time.monotonic() - start_time,
                )
            )
