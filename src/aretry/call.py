r"""Convenience functions to retry a single call.

These helpers build an executor for one call, which is the simplest way
to retry an operation without keeping an executor around.

Example:
    ```pycon
    >>> from aretry import RetryPolicy, retry_call
    >>> outcome = retry_call(int, "42", policy=RetryPolicy.no_retry())
    >>> outcome.value
    42
    >>> outcome = retry_call(int, "x", policy=RetryPolicy.fixed(0.0, max_attempts=2))
    >>> outcome.ok, outcome.attempts
    (False, 2)

    ```
"""

from __future__ import annotations

__all__ = ["retry_call", "retry_call_async", "retryable"]

import functools
import inspect
from typing import TYPE_CHECKING, Any, TypeVar

from aretry.retry import AsyncRetryExecutor, RetryExecutor

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.callbacks import CallbackConfig
    from aretry.cancellation import CancellationToken
    from aretry.outcome import RetryOutcome
    from aretry.policy import RetryPolicy

T = TypeVar("T")


def retry_call(
    operation: Callable[..., T],
    *args: Any,
    policy: RetryPolicy | None = None,
    callbacks: CallbackConfig | None = None,
    cancel_token: CancellationToken | None = None,
    **kwargs: Any,
) -> RetryOutcome[T]:
    """Run ``operation(*args, **kwargs)`` with automatic retry logic.

    Args:
        operation: The function to run.
        *args: Positional arguments passed to the operation.
        policy: The retry policy. Defaults to ``RetryPolicy()``, which
            makes at most three attempts with exponential backoff.
        callbacks: Optional lifecycle callbacks.
        cancel_token: Optional token making the waits interruptible.
        **kwargs: Keyword arguments passed to the operation.

    Returns:
        The outcome of the retry call.
    """
    executor = RetryExecutor(policy=policy, callbacks=callbacks)
    return executor.execute(operation, *args, cancel_token=cancel_token, **kwargs)


async def retry_call_async(
    operation: Callable[..., Awaitable[T]],
    *args: Any,
    policy: RetryPolicy | None = None,
    callbacks: CallbackConfig | None = None,
    cancel_token: CancellationToken | None = None,
    **kwargs: Any,
) -> RetryOutcome[T]:
    """Await ``operation(*args, **kwargs)`` with automatic retry logic.

    This is the asynchronous version of ``retry_call``.

    Args:
        operation: The coroutine function to run.
        *args: Positional arguments passed to the operation.
        policy: The retry policy. Defaults to ``RetryPolicy()``.
        callbacks: Optional lifecycle callbacks.
        cancel_token: Optional token making the waits interruptible.
        **kwargs: Keyword arguments passed to the operation.

    Returns:
        The outcome of the retry call.
    """
    executor = AsyncRetryExecutor(policy=policy, callbacks=callbacks)
    return await executor.execute(operation, *args, cancel_token=cancel_token, **kwargs)


def retryable(
    policy: RetryPolicy | None = None,
    callbacks: CallbackConfig | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate a function so that each call is retried.

    The decorated function returns a ``RetryOutcome`` instead of the
    original return value. Coroutine functions are run with the
    asynchronous executor.

    Args:
        policy: The retry policy. Defaults to ``RetryPolicy()``.
        callbacks: Optional lifecycle callbacks.

    Returns:
        The decorator.

    Example:
        ```pycon
        >>> from aretry import RetryPolicy, retryable
        >>> @retryable(RetryPolicy.no_retry())
        ... def parse(text):
        ...     return int(text)
        ...
        >>> parse("7").unwrap()
        7

        ```
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(func):
            async_executor = AsyncRetryExecutor(policy=policy, callbacks=callbacks)

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> RetryOutcome[Any]:
                return await async_executor.execute(func, *args, **kwargs)

            return async_wrapper

        executor = RetryExecutor(policy=policy, callbacks=callbacks)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> RetryOutcome[Any]:
            return executor.execute(func, *args, **kwargs)

        return wrapper

    return decorator
