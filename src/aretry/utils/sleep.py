r"""Wait time calculation utilities.

This module provides the function that turns a backoff strategy, an
optional cap and an optional jitter factor into the delay applied
between two attempts.
"""

from __future__ import annotations

__all__ = ["calculate_wait_time"]

import logging
import random
from typing import TYPE_CHECKING

from aretry.constants import MAX_WAIT_TIME

if TYPE_CHECKING:
    from aretry.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_wait_time(
    attempt: int,
    backoff: BaseBackoffStrategy,
    jitter_factor: float = 0.0,
    max_wait_time: float | None = None,
) -> float:
    """Calculate the wait time after a failed attempt.

    The wait time is calculated as follows:
    1. Compute the base delay with ``backoff.calculate(attempt)``.
    2. Apply the max_wait_time cap (if set):
       - wait_time = min(wait_time, max_wait_time)
    3. Apply jitter (if jitter_factor > 0):
       - jitter = random.uniform(0, jitter_factor) * wait_time
       - total_wait_time = wait_time + jitter
    4. Clamp the result to ``MAX_WAIT_TIME`` (30 days), which also
       turns an infinite delay into a finite one.

    Args:
        attempt: The number of the failed attempt (1-indexed).
        backoff: The backoff strategy computing the base delay.
        jitter_factor: Factor for adding random jitter. The jitter is
            ADDED to the base delay. Set to 0 to disable jitter.
        max_wait_time: Optional cap applied to the base delay, before
            jitter.

    Returns:
        The wait time in seconds, including any jitter applied.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> from aretry.utils.sleep import calculate_wait_time
        >>> backoff = ExponentialBackoff(base_delay=0.3)
        >>> calculate_wait_time(attempt=1, backoff=backoff)
        0.3
        >>> calculate_wait_time(attempt=3, backoff=backoff)
        1.2
        >>> calculate_wait_time(attempt=3, backoff=backoff, max_wait_time=1.0)
        1.0

        ```
    """
    wait_time = backoff.calculate(attempt)
    if wait_time > MAX_WAIT_TIME:
        logger.debug(f"Clamping wait time from {wait_time}s to {MAX_WAIT_TIME}s")
        wait_time = MAX_WAIT_TIME

    if max_wait_time is not None and wait_time > max_wait_time:
        logger.debug(f"Capping wait time from {wait_time:.2f}s to {max_wait_time:.2f}s")
        wait_time = max_wait_time

    if jitter_factor > 0 and wait_time > 0:
        jitter = random.uniform(0, jitter_factor) * wait_time  # noqa: S311
        logger.debug(f"Adding {jitter:.2f}s of jitter to {wait_time:.2f}s wait")
        wait_time = min(wait_time + jitter, MAX_WAIT_TIME)

    return wait_time
