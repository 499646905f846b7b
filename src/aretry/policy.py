r"""Immutable retry policies.

A policy describes how many attempts to make and how long to wait
between them. It holds no state, so a single instance can be shared by
any number of concurrent retry calls.
"""

from __future__ import annotations

__all__ = ["RetryPolicy"]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from aretry.backoff import (
    BaseBackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    NoBackoff,
    as_backoff,
)
from aretry.constants import DEFAULT_BASE_DELAY, DEFAULT_MAX_ATTEMPTS
from aretry.utils.sleep import calculate_wait_time
from aretry.validation import (
    validate_max_attempts,
    validate_non_negative,
    validate_optional_non_negative,
)

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration of the attempt budget and the wait schedule.

    All parameters are validated at construction time and a
    ``PolicyError`` is raised for invalid values.

    Args:
        max_attempts: Maximum number of attempts, including the first
            one. ``1`` means the operation is tried once and never
            retried. ``None`` means the operation is retried until it
            succeeds or the call is cancelled; prefer
            ``RetryPolicy.forever()`` to make that choice visible.
        backoff: The wait strategy between attempts. Accepts a backoff
            strategy, a function mapping the failed attempt number to a
            delay, or ``None`` for no waiting. Defaults to
            ``ExponentialBackoff(base_delay=0.3)``.
        jitter_factor: Factor for adding random jitter to each delay.
            Must be >= 0.
        max_wait_time: Optional cap on each individual delay, applied
            before jitter. Must be >= 0 if provided.

    Example:
        ```pycon
        >>> from aretry import RetryPolicy
        >>> from aretry.backoff import ConstantBackoff
        >>> policy = RetryPolicy(max_attempts=3, backoff=ConstantBackoff(10.0))
        >>> [policy.wait_time(attempt) for attempt in (1, 2)]
        [10.0, 10.0]
        >>> policy.merge(max_attempts=5).max_attempts
        5
        >>> policy.max_attempts  # Original unchanged
        3

        ```
    """

    max_attempts: int | None = DEFAULT_MAX_ATTEMPTS
    backoff: BaseBackoffStrategy = field(
        default_factory=lambda: ExponentialBackoff(base_delay=DEFAULT_BASE_DELAY)
    )
    jitter_factor: float = 0.0
    max_wait_time: float | None = None

    def __post_init__(self) -> None:
        validate_max_attempts(self.max_attempts)
        validate_non_negative("jitter_factor", self.jitter_factor)
        validate_optional_non_negative("max_wait_time", self.max_wait_time)
        object.__setattr__(self, "backoff", as_backoff(self.backoff))

    @property
    def unbounded(self) -> bool:
        """Indicate whether the policy retries without an attempt limit."""
        return self.max_attempts is None

    def is_last_attempt(self, attempt: int) -> bool:
        """Indicate whether ``attempt`` (1-indexed) exhausts the budget."""
        return self.max_attempts is not None and attempt >= self.max_attempts

    def wait_time(self, attempt: int) -> float:
        """Compute the delay after failed attempt ``attempt``.

        Args:
            attempt: The number of the failed attempt (1-indexed).

        Returns:
            The delay in seconds before the next attempt.
        """
        return calculate_wait_time(
            attempt=attempt,
            backoff=self.backoff,
            jitter_factor=self.jitter_factor,
            max_wait_time=self.max_wait_time,
        )

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with some parameters overridden.

        Args:
            **overrides: Parameters to override.

        Returns:
            A new validated ``RetryPolicy``.
        """
        return replace(self, **overrides)

    @classmethod
    def no_retry(cls) -> RetryPolicy:
        """Create a policy that tries the operation exactly once."""
        return cls(max_attempts=1, backoff=NoBackoff())

    @classmethod
    def fixed(
        cls,
        delay: float,
        max_attempts: int | None = DEFAULT_MAX_ATTEMPTS,
        **kwargs: Any,
    ) -> RetryPolicy:
        """Create a policy waiting ``delay`` seconds between attempts."""
        return cls(max_attempts=max_attempts, backoff=ConstantBackoff(delay), **kwargs)

    @classmethod
    def linear(
        cls,
        base_delay: float,
        max_attempts: int | None = DEFAULT_MAX_ATTEMPTS,
        max_delay: float | None = None,
        **kwargs: Any,
    ) -> RetryPolicy:
        """Create a policy waiting ``base_delay * attempt`` seconds."""
        return cls(
            max_attempts=max_attempts,
            backoff=LinearBackoff(base_delay=base_delay, max_delay=max_delay),
            **kwargs,
        )

    @classmethod
    def exponential(
        cls,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_attempts: int | None = DEFAULT_MAX_ATTEMPTS,
        max_delay: float | None = None,
        **kwargs: Any,
    ) -> RetryPolicy:
        """Create a policy waiting ``base_delay * 2 ** (attempt - 1)`` seconds."""
        return cls(
            max_attempts=max_attempts,
            backoff=ExponentialBackoff(base_delay=base_delay, max_delay=max_delay),
            **kwargs,
        )

    @classmethod
    def forever(
        cls,
        backoff: BaseBackoffStrategy | Callable[[int], float] | None = None,
        **kwargs: Any,
    ) -> RetryPolicy:
        """Create a policy without attempt limit.

        The retry loop then only stops on success or cancellation.

        Args:
            backoff: The wait strategy between attempts. Defaults to
                ``ExponentialBackoff(base_delay=0.3)``.
            **kwargs: Other ``RetryPolicy`` parameters.

        Returns:
            An unbounded retry policy.
        """
        if backoff is None:
            backoff = ExponentialBackoff(base_delay=DEFAULT_BASE_DELAY)
        return cls(max_attempts=None, backoff=backoff, **kwargs)
