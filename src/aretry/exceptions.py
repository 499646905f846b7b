r"""Exceptions raised by the aretry library.

The retry executors never raise on behalf of the operation they run:
operation failures are reported as ``Failure`` outcomes. The exceptions
in this module cover the remaining cases, namely invalid policies and
explicitly unwrapping an unsuccessful outcome.
"""

from __future__ import annotations

__all__ = ["PolicyError", "RetryError"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aretry.outcome import Cancelled, Failure


class PolicyError(ValueError):
    """Raised when a retry policy is built with invalid parameters.

    This is a programming error and is reported when the policy is
    constructed, never while an operation is being retried.

    Example:
        ```pycon
        >>> from aretry import RetryPolicy
        >>> from aretry.exceptions import PolicyError
        >>> try:
        ...     RetryPolicy(max_attempts=0)
        ... except PolicyError as exc:
        ...     print(exc)
        ...
        max_attempts must be >= 1, got 0

        ```
    """


class RetryError(Exception):
    """Raised by ``unwrap()`` when the outcome is not a success.

    Args:
        outcome: The ``Failure`` or ``Cancelled`` outcome that was unwrapped.

    Attributes:
        outcome: The unwrapped outcome.
        last_error: The error of the last failed attempt, if any.
        attempts: The number of attempts that were made.
    """

    def __init__(self, outcome: Failure | Cancelled) -> None:
        self.outcome = outcome
        self.last_error = outcome.last_error
        self.attempts = outcome.attempts
        super().__init__(self._build_message(outcome))

    @staticmethod
    def _build_message(outcome: Failure | Cancelled) -> str:
        if outcome.cancelled:
            msg = f"retry cancelled after {outcome.attempts} attempt(s)"
        else:
            msg = f"operation failed after {outcome.attempts} attempt(s)"
        if outcome.last_error is not None:
            msg += f": {outcome.last_error!r}"
        return msg
