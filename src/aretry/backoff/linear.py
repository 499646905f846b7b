r"""Linear backoff strategy."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, check_attempt
from aretry.validation import validate_non_negative, validate_optional_non_negative


class LinearBackoff(BaseBackoffStrategy):
    """Linear backoff strategy.

    Calculates delay as: base_delay * attempt, with optional max_delay cap.

    Args:
        base_delay: The base delay in seconds (default: 1.0).
        max_delay: Optional maximum delay cap in seconds. If specified,
            delays will not exceed this value.

    Raises:
        PolicyError: If ``base_delay`` or ``max_delay`` is negative.

    Example:
        ```pycon
        >>> from aretry.backoff import LinearBackoff
        >>> backoff = LinearBackoff(base_delay=1.0)
        >>> backoff.calculate(1)
        1.0
        >>> backoff.calculate(2)
        2.0
        >>> backoff.calculate(3)
        3.0
        >>> backoff = LinearBackoff(base_delay=2.0, max_delay=5.0)
        >>> backoff.calculate(6)  # Would be 12.0, but capped
        5.0

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        validate_non_negative("base_delay", base_delay)
        validate_optional_non_negative("max_delay", max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def calculate(self, attempt: int) -> float:
        """Calculate linear backoff delay.

        Args:
            attempt: The number of the failed attempt (1-indexed).

        Returns:
            The calculated delay: base_delay * attempt, capped at
            max_delay if set.
        """
        check_attempt(attempt)
        delay = self.base_delay * attempt
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
