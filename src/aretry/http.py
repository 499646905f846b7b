r"""HTTP requests retried with httpx.

The executors treat every exception as a failed attempt and do not
look at what went wrong. This module adds the HTTP-specific
classification on top: transport errors and a small set of transient
status codes are turned into failures, every other response is returned
to the caller as is.

Example:
    ```pycon
    >>> from aretry import RetryPolicy
    >>> from aretry.http import request_with_retry
    >>> outcome = request_with_retry(
    ...     "GET", "https://api.example.com/data", policy=RetryPolicy.exponential(max_attempts=5)
    ... )  # doctest: +SKIP
    >>> outcome.unwrap().json()  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "RETRY_STATUS_CODES",
    "RetryableStatusError",
    "async_http_operation",
    "http_operation",
    "request_with_retry",
    "request_with_retry_async",
]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from aretry.retry import AsyncRetryExecutor, RetryExecutor

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.callbacks import CallbackConfig
    from aretry.cancellation import CancellationToken
    from aretry.outcome import RetryOutcome
    from aretry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)

# HTTP status codes that should trigger automatic retry
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

# Default timeout in seconds for clients created by this module
DEFAULT_TIMEOUT = 10.0


class RetryableStatusError(Exception):
    """Raised when a response has a status code that should be retried.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        status_code: The status code of the response.
        response: The response object.

    Example:
        ```pycon
        >>> from aretry.http import RetryableStatusError
        >>> error = RetryableStatusError("GET", "https://example.com", 503)
        >>> str(error)
        'GET request to https://example.com failed with status 503'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(f"{method} request to {url} failed with status {status_code}")
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response


def _check_response(
    response: httpx.Response, method: str, url: str, status_forcelist: tuple[int, ...]
) -> httpx.Response:
    if response.status_code in status_forcelist:
        logger.debug(f"{method} request to {url} returned retryable status {response.status_code}")
        raise RetryableStatusError(
            method=method, url=url, status_code=response.status_code, response=response
        )
    return response


def http_operation(
    client: httpx.Client,
    method: str,
    url: str,
    status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
    **kwargs: Any,
) -> Callable[[], httpx.Response]:
    """Create an operation sending one HTTP request.

    Args:
        client: The client used to send the request.
        method: The HTTP method.
        url: The URL to request.
        status_forcelist: Status codes that make the attempt fail with
            ``RetryableStatusError``.
        **kwargs: Additional arguments passed to ``client.request``.

    Returns:
        A zero-argument function sending the request and returning the
        response. ``httpx`` transport errors propagate from it.
    """

    def operation() -> httpx.Response:
        response = client.request(method, url, **kwargs)
        return _check_response(response, method, url, status_forcelist)

    operation.__qualname__ = f"{method} {url}"
    return operation


def async_http_operation(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
    **kwargs: Any,
) -> Callable[[], Awaitable[httpx.Response]]:
    """Create an operation sending one HTTP request asynchronously.

    This is the asynchronous version of ``http_operation``.
    """

    async def operation() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        return _check_response(response, method, url, status_forcelist)

    operation.__qualname__ = f"{method} {url}"
    return operation


def request_with_retry(
    method: str,
    url: str,
    *,
    policy: RetryPolicy | None = None,
    client: httpx.Client | None = None,
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
    callbacks: CallbackConfig | None = None,
    cancel_token: CancellationToken | None = None,
    **kwargs: Any,
) -> RetryOutcome[httpx.Response]:
    """Send an HTTP request with automatic retry logic.

    Args:
        method: The HTTP method.
        url: The URL to request.
        policy: The retry policy. Defaults to ``RetryPolicy()``.
        client: Optional client. If not provided, a client is created
            with ``timeout`` and closed before returning.
        timeout: Timeout of the created client. Ignored when ``client``
            is provided.
        status_forcelist: Status codes that trigger a retry.
        callbacks: Optional lifecycle callbacks.
        cancel_token: Optional token making the waits interruptible.
        **kwargs: Additional arguments passed to ``client.request``.

    Returns:
        The outcome; on success its value is the ``httpx.Response``.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=timeout)
    try:
        operation = http_operation(client, method, url, status_forcelist, **kwargs)
        executor = RetryExecutor(policy=policy, callbacks=callbacks)
        return executor.execute(operation, cancel_token=cancel_token)
    finally:
        if owns_client:
            client.close()


async def request_with_retry_async(
    method: str,
    url: str,
    *,
    policy: RetryPolicy | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
    callbacks: CallbackConfig | None = None,
    cancel_token: CancellationToken | None = None,
    **kwargs: Any,
) -> RetryOutcome[httpx.Response]:
    """Send an HTTP request asynchronously with automatic retry logic.

    This is the asynchronous version of ``request_with_retry``.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=timeout)
    try:
        operation = async_http_operation(client, method, url, status_forcelist, **kwargs)
        executor = AsyncRetryExecutor(policy=policy, callbacks=callbacks)
        return await executor.execute(operation, cancel_token=cancel_token)
    finally:
        if owns_client:
            await client.aclose()
