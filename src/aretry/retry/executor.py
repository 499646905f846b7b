r"""Synchronous retry executor.

This module provides the RetryExecutor class that runs a fallible
operation under a retry policy and reports a ``RetryOutcome``.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import time
from typing import TYPE_CHECKING, Any, TypeVar

from aretry.policy import RetryPolicy
from aretry.retry.executor_core import (
    finish_cancelled,
    finish_failure,
    finish_success,
    log_retry,
    operation_name,
)
from aretry.retry.manager import CallbackManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.callbacks import CallbackConfig
    from aretry.cancellation import CancellationToken
    from aretry.outcome import RetryOutcome

T = TypeVar("T")


class RetryExecutor:
    """Executes an operation with automatic retry logic.

    The executor is a blocking loop from the caller's point of view. It
    keeps no per-call state on the instance, so one executor can serve
    many concurrent calls.

    Args:
        policy: The retry policy. Defaults to ``RetryPolicy()``.
        callbacks: Optional lifecycle callbacks.
        sleep: Function used to suspend between attempts. Defaults to
            ``time.sleep``. It is not used by calls given a
            ``cancel_token``: those wait on the token so the wait can be
            interrupted.

    Attributes:
        callbacks: Manager for invoking callbacks.

    Example:
        ```pycon
        >>> from aretry import RetryPolicy
        >>> from aretry.retry import RetryExecutor
        >>> calls = []
        >>> def flaky():
        ...     calls.append(1)
        ...     if len(calls) < 3:
        ...         raise ConnectionError("not yet")
        ...     return "done"
        ...
        >>> executor = RetryExecutor(RetryPolicy.fixed(0.0, max_attempts=5))
        >>> outcome = executor.execute(flaky)
        >>> outcome.value, outcome.attempts
        ('done', 3)

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        callbacks: CallbackConfig | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._policy = policy if policy is not None else RetryPolicy()
        self.callbacks: CallbackManager = CallbackManager(callbacks, self._policy)
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        """The retry policy (read-only)."""
        return self._policy

    def execute(
        self,
        operation: Callable[..., T],
        *args: Any,
        cancel_token: CancellationToken | None = None,
        **kwargs: Any,
    ) -> RetryOutcome[T]:
        """Run the operation until it succeeds or the policy is exhausted.

        Every ``Exception`` raised by the operation counts as a failed
        attempt; the executor never raises on the operation's behalf.
        Exceptions that are not ``Exception`` subclasses, such as
        ``KeyboardInterrupt``, propagate immediately. No wait happens
        after the final attempt.

        Args:
            operation: The function to run. It must be safe to call
                several times.
            *args: Positional arguments passed to the operation on each
                attempt.
            cancel_token: Optional token making the waits between
                attempts interruptible.
            **kwargs: Keyword arguments passed to the operation on each
                attempt.

        Returns:
            ``Success`` with the operation's value, ``Failure`` with the
            last error once the attempt budget is exhausted, or
            ``Cancelled`` if the token was cancelled.
        """
        name = operation_name(operation)
        start_time = time.monotonic()
        last_error: Exception | None = None
        attempt = 1
        while True:
            if cancel_token is not None and cancel_token.cancelled:
                return finish_cancelled(self.callbacks, name, attempt - 1, last_error, start_time)

            self.callbacks.on_attempt(name, attempt)
            try:
                value = operation(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001
                last_error = exc
            else:
                return finish_success(self.callbacks, name, attempt, value, start_time)

            if self.policy.is_last_attempt(attempt):
                return finish_failure(self.callbacks, name, attempt, last_error, start_time)

            wait_time = self.policy.wait_time(attempt)
            log_retry(name, attempt, self.policy.max_attempts, wait_time, last_error)
            self.callbacks.on_retry(name, attempt, wait_time, last_error)
            if self._wait(wait_time, cancel_token):
                return finish_cancelled(self.callbacks, name, attempt, last_error, start_time)
            attempt += 1

    def _wait(self, wait_time: float, cancel_token: CancellationToken | None) -> bool:
        """Suspend between two attempts.

        Returns:
            ``True`` if the token was cancelled during the wait.
        """
        if wait_time <= 0:
            return False
        if cancel_token is not None:
            return cancel_token.wait(wait_time)
        (self._sleep or time.sleep)(wait_time)
        return False
