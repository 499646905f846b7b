r"""Cooperative cancellation for retry calls.

A ``CancellationToken`` is handed to an executor to make its
inter-attempt waits interruptible. Calling ``cancel()`` from any thread
or event loop wakes up the waiting retry loop immediately, which then
reports a ``Cancelled`` outcome.

Example:
    ```pycon
    >>> from aretry.cancellation import CancellationToken
    >>> token = CancellationToken()
    >>> token.cancelled
    False
    >>> token.wait(0.0)
    False
    >>> token.cancel()
    >>> token.wait(10.0)  # Returns immediately
    True

    ```
"""

from __future__ import annotations

__all__ = ["CancellationToken"]

import asyncio
import logging
import threading

logger: logging.Logger = logging.getLogger(__name__)


def _wake(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)


class CancellationToken:
    """Thread-safe cancellation flag with interruptible waits.

    The token can be shared by several retry calls; cancelling it
    cancels all of them. It cannot be reset.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._waiters: set[tuple[asyncio.AbstractEventLoop, asyncio.Future[None]]] = set()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(cancelled={self.cancelled})"

    @property
    def cancelled(self) -> bool:
        """Indicate whether ``cancel()`` has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation and wake up every pending wait.

        Calling this method more than once has no further effect.
        """
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            waiters = list(self._waiters)
            self._waiters.clear()
        logger.debug("Cancellation requested")
        for loop, future in waiters:
            if not loop.is_closed():
                loop.call_soon_threadsafe(_wake, future)

    def wait(self, timeout: float) -> bool:
        """Block until the timeout elapses or the token is cancelled.

        Args:
            timeout: Maximum time to wait in seconds.

        Returns:
            ``True`` if the token is cancelled, ``False`` if the timeout
            elapsed first.
        """
        return self._event.wait(timeout)

    async def wait_async(self, timeout: float) -> bool:
        """Wait without blocking the event loop.

        Args:
            timeout: Maximum time to wait in seconds.

        Returns:
            ``True`` if the token is cancelled, ``False`` if the timeout
            elapsed first.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[None] = loop.create_future()
        key = (loop, future)
        with self._lock:
            if self._event.is_set():
                return True
            self._waiters.add(key)
        try:
            await asyncio.wait({future}, timeout=timeout)
        finally:
            with self._lock:
                self._waiters.discard(key)
            if not future.done():
                future.cancel()
        return self._event.is_set()
