r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import math

from aretry.backoff.base import BaseBackoffStrategy, check_attempt
from aretry.validation import validate_non_negative, validate_optional_non_negative


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** (attempt - 1)), with optional
    max_delay cap. Without a cap the delay saturates at ``math.inf`` once
    it no longer fits in a float.

    This is the default backoff strategy of ``RetryPolicy``.

    Args:
        base_delay: The delay after the first failure (default: 0.3).
        max_delay: Optional maximum delay cap in seconds. If specified,
            delays will not exceed this value.

    Raises:
        PolicyError: If ``base_delay`` or ``max_delay`` is negative.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=5.0)
        >>> [backoff.calculate(attempt) for attempt in (1, 2, 3)]
        [5.0, 10.0, 20.0]
        >>> backoff = ExponentialBackoff(base_delay=1.0, max_delay=5.0)
        >>> backoff.calculate(11)  # Would be 1024.0, but capped
        5.0

        ```
    """

    def __init__(self, base_delay: float = 0.3, max_delay: float | None = None) -> None:
        validate_non_negative("base_delay", base_delay)
        validate_optional_non_negative("max_delay", max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The number of the failed attempt (1-indexed).

        Returns:
            The calculated delay: base_delay * (2 ** (attempt - 1)),
            capped at max_delay if set.
        """
        check_attempt(attempt)
        if self.base_delay == 0:
            return 0.0
        try:
            delay = math.ldexp(self.base_delay, attempt - 1)
        except OverflowError:
            delay = math.inf
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
