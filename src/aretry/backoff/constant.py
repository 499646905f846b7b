r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, check_attempt
from aretry.validation import validate_non_negative


class ConstantBackoff(BaseBackoffStrategy):
    """Constant/fixed backoff strategy.

    Returns the same delay after every failed attempt, regardless of the
    attempt number.

    Args:
        delay: The fixed delay in seconds (default: 1.0).

    Raises:
        PolicyError: If ``delay`` is negative.

    Example:
        ```pycon
        >>> from aretry.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=2.5)
        >>> backoff.calculate(1)
        2.5
        >>> backoff.calculate(10)
        2.5

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        validate_non_negative("delay", delay)
        self.delay = delay

    def calculate(self, attempt: int) -> float:
        """Calculate constant backoff delay.

        Args:
            attempt: The number of the failed attempt (1-indexed, unused
                apart from validation).

        Returns:
            The fixed delay value.
        """
        check_attempt(attempt)
        return self.delay
