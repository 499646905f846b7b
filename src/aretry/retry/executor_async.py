r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class that runs a coroutine
function under a retry policy and reports a ``RetryOutcome``.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import inspect
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
    from collections.abc import Awaitable, Callable

    from aretry.callbacks import CallbackConfig
    from aretry.cancellation import CancellationToken
    from aretry.outcome import RetryOutcome

T = TypeVar("T")


class AsyncRetryExecutor:
    """Executes a coroutine function with automatic retry logic.

    Waits between attempts use ``asyncio.sleep`` so other tasks keep
    running. Cancelling the awaiting task raises
    ``asyncio.CancelledError`` as usual; a ``CancellationToken`` gives a
    ``Cancelled`` outcome instead.

    Args:
        policy: The retry policy. Defaults to ``RetryPolicy()``.
        callbacks: Optional lifecycle callbacks.
        sleep: Coroutine function used to suspend between attempts.
            Defaults to ``asyncio.sleep``. It is not used by calls given
            a ``cancel_token``: those wait on the token so the wait can
            be interrupted.

    Attributes:
        callbacks: Manager for invoking callbacks.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import RetryPolicy
        >>> from aretry.retry import AsyncRetryExecutor
        >>> async def fetch():
        ...     return 42
        ...
        >>> executor = AsyncRetryExecutor(RetryPolicy.no_retry())
        >>> asyncio.run(executor.execute(fetch)).value
        42

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        callbacks: CallbackConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._policy = policy if policy is not None else RetryPolicy()
        self.callbacks: CallbackManager = CallbackManager(callbacks, self._policy)
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        """The retry policy (read-only)."""
        return self._policy

    async def execute(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        cancel_token: CancellationToken | None = None,
        **kwargs: Any,
    ) -> RetryOutcome[T]:
        """Await the operation until it succeeds or the policy is exhausted.

        The operation is normally a coroutine function. A plain function
        is accepted too; its result is awaited only when it is awaitable.

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
                if inspect.isawaitable(value):
                    value = await value
            except Exception as exc:  # noqa: BLE001
                last_error = exc
            else:
                return finish_success(self.callbacks, name, attempt, value, start_time)

            if self.policy.is_last_attempt(attempt):
                return finish_failure(self.callbacks, name, attempt, last_error, start_time)

            wait_time = self.policy.wait_time(attempt)
            log_retry(name, attempt, self.policy.max_attempts, wait_time, last_error)
            self.callbacks.on_retry(name, attempt, wait_time, last_error)
            if await self._wait(wait_time, cancel_token):
                return finish_cancelled(self.callbacks, name, attempt, last_error, start_time)
            attempt += 1

    async def _wait(self, wait_time: float, cancel_token: CancellationToken | None) -> bool:
        if wait_time <= 0:
            return False
        if cancel_token is not None:
            return await cancel_token.wait_async(wait_time)
        await (self._sleep or asyncio.sleep)(wait_time)
        return False
