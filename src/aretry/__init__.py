r"""aretry - Run fallible operations under a retry policy.

This package repeatedly invokes a caller-supplied operation according to
an immutable retry policy, until it succeeds or the attempt budget is
exhausted, and reports a definite outcome instead of raising.

Key Features:
    - Immutable, reusable policies validated at construction time
    - Backoff strategies: none, constant, linear, exponential, Fibonacci,
      or any function of the attempt number
    - Optional jitter and per-wait cap
    - Tagged outcomes: Success, Failure and Cancelled
    - Cooperative cancellation of the waits between attempts
    - Synchronous and asynchronous executors
    - Callback system for observability (logging, metrics, alerting)
    - Optional httpx integration for HTTP requests

Example:
    ```pycon
    >>> from aretry import RetryPolicy, retry_call
    >>> attempts = []
    >>> def flaky():
    ...     attempts.append(1)
    ...     if len(attempts) < 2:
    ...         raise ConnectionError("temporarily unavailable")
    ...     return "ok"
    ...
    >>> outcome = retry_call(flaky, policy=RetryPolicy.fixed(0.0, max_attempts=3))
    >>> outcome.value, outcome.attempts
    ('ok', 2)

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "CallbackConfig",
    "CancellationToken",
    "Cancelled",
    "Failure",
    "PolicyError",
    "RetryError",
    "RetryExecutor",
    "RetryOutcome",
    "RetryPolicy",
    "Success",
    "__version__",
    "retry_call",
    "retry_call_async",
    "retryable",
]

from importlib.metadata import PackageNotFoundError, version

from aretry.call import retry_call, retry_call_async, retryable
from aretry.callbacks import CallbackConfig
from aretry.cancellation import CancellationToken
from aretry.exceptions import PolicyError, RetryError
from aretry.outcome import Cancelled, Failure, RetryOutcome, Success
from aretry.policy import RetryPolicy
from aretry.retry import AsyncRetryExecutor, RetryExecutor

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
