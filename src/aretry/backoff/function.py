r"""Backoff strategy backed by a plain function."""

from __future__ import annotations

__all__ = ["CallableBackoff"]

import logging
import math
from typing import TYPE_CHECKING

from aretry.backoff.base import BaseBackoffStrategy, check_attempt

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class CallableBackoff(BaseBackoffStrategy):
    """Backoff strategy that delegates to a function.

    The function receives the 1-indexed number of the failed attempt and
    returns the delay in seconds. It should be pure. A negative or NaN
    result is logged as a warning and replaced by 0, so a faulty function
    never aborts a retry loop.

    Args:
        func: The function computing the delay.

    Raises:
        TypeError: If ``func`` is not callable.

    Example:
        ```pycon
        >>> from aretry.backoff import CallableBackoff
        >>> backoff = CallableBackoff(lambda attempt: 0.5 * attempt**2)
        >>> backoff.calculate(3)
        4.5

        ```
    """

    def __init__(self, func: Callable[[int], float]) -> None:
        if not callable(func):
            msg = f"func must be callable, got {func!r}"
            raise TypeError(msg)
        self.func = func

    def calculate(self, attempt: int) -> float:
        """Calculate the delay by calling the wrapped function.

        Args:
            attempt: The number of the failed attempt (1-indexed).

        Returns:
            The delay returned by the function, or 0.0 if it is
            negative or NaN.
        """
        check_attempt(attempt)
        delay = self.func(attempt)
        if math.isnan(delay) or delay < 0:
            logger.warning(
                f"Backoff function {self.func!r} returned an invalid delay ({delay}) "
                f"for attempt {attempt}, using 0.0"
            )
            return 0.0
        return delay
