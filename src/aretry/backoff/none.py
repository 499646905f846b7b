r"""Backoff strategy that never waits."""

from __future__ import annotations

__all__ = ["NoBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, check_attempt


class NoBackoff(BaseBackoffStrategy):
    """Zero-delay backoff strategy.

    The next attempt starts immediately after a failure.

    Example:
        ```pycon
        >>> from aretry.backoff import NoBackoff
        >>> NoBackoff().calculate(1)
        0.0
        >>> NoBackoff().calculate(10)
        0.0

        ```
    """

    def calculate(self, attempt: int) -> float:
        check_attempt(attempt)
        return 0.0
