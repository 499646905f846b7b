r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoff"]

import math

from aretry.backoff.base import BaseBackoffStrategy, check_attempt
from aretry.validation import validate_non_negative, validate_optional_non_negative


class FibonacciBackoff(BaseBackoffStrategy):
    """Fibonacci backoff strategy.

    Calculates delay as: base_delay * fibonacci(attempt), with optional
    max_delay cap. The sequence (1, 1, 2, 3, 5, 8, ...) grows more slowly
    than exponential backoff. Without a cap the delay saturates at
    ``math.inf`` once it no longer fits in a float.

    Args:
        base_delay: The base delay in seconds (default: 1.0).
        max_delay: Optional maximum delay cap in seconds.

    Raises:
        PolicyError: If ``base_delay`` or ``max_delay`` is negative.

    Example:
        ```pycon
        >>> from aretry.backoff import FibonacciBackoff
        >>> backoff = FibonacciBackoff(base_delay=1.0)
        >>> [backoff.calculate(attempt) for attempt in range(1, 6)]
        [1.0, 1.0, 2.0, 3.0, 5.0]
        >>> FibonacciBackoff(base_delay=1.0, max_delay=10.0).calculate(11)
        10.0

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        validate_non_negative("base_delay", base_delay)
        validate_optional_non_negative("max_delay", max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    @staticmethod
    def _fibonacci(n: int) -> float:
        a, b = 0.0, 1.0
        for _ in range(n):
            a, b = b, a + b
            if math.isinf(a):
                break
        return a

    def calculate(self, attempt: int) -> float:
        """Calculate Fibonacci backoff delay.

        Args:
            attempt: The number of the failed attempt (1-indexed).

        Returns:
            The calculated delay: base_delay * fibonacci(attempt),
            capped at max_delay if set.
        """
        check_attempt(attempt)
        if self.base_delay == 0:
            return 0.0
        delay = self.base_delay * self._fibonacci(attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
