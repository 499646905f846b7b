r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "check_attempt"]

from abc import ABC, abstractmethod


def check_attempt(attempt: int) -> None:
    """Check that an attempt number is 1-based.

    Args:
        attempt: The attempt number to check.

    Raises:
        ValueError: If ``attempt`` is lower than 1.
    """
    if attempt < 1:
        msg = f"attempt must be >= 1, got {attempt}"
        raise ValueError(msg)


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait after a failed
    attempt before the next one. Strategies are pure: the same attempt
    number always gives the same delay.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay after a failed attempt.

        Args:
            attempt: The number of the attempt that just failed
                (1-indexed). For example, attempt=1 is the delay before
                the second attempt.

        Returns:
            The calculated delay in seconds before the next attempt.
        """

    def __call__(self, attempt: int) -> float:
        return self.calculate(attempt)

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in vars(self).items())
        return f"{type(self).__name__}({args})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(vars(self).items()))))
