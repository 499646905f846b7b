r"""Outcomes reported by the retry executors.

An outcome is the definite result of one retry call. It is one of:

- ``Success``: the operation returned a value.
- ``Failure``: every allowed attempt failed.
- ``Cancelled``: the call was cancelled through its cancellation token.

Example:
    ```pycon
    >>> from aretry.outcome import Failure, Success
    >>> outcome = Success(value=42, attempts=2)
    >>> outcome.ok
    True
    >>> outcome.unwrap()
    42
    >>> Failure(last_error=ValueError("boom"), attempts=3).ok
    False

    ```
"""

from __future__ import annotations

__all__ = ["Cancelled", "Failure", "RetryOutcome", "Success"]

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from aretry.exceptions import RetryError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Outcome of an operation that eventually returned a value.

    Attributes:
        value: The value returned by the successful attempt.
        attempts: The number of attempts made (1-indexed), which is
            also the number of the successful attempt.
        elapsed: Wall-clock seconds spent in the retry call.
    """

    value: T
    attempts: int
    elapsed: float = 0.0

    ok = True
    cancelled = False
    last_error = None

    def unwrap(self) -> T:
        """Return the value of the successful attempt."""
        return self.value


@dataclass(frozen=True)
class Failure:
    """Outcome of an operation whose attempt budget was exhausted.

    Attributes:
        last_error: The exception raised by the last attempt.
        attempts: The number of attempts made, equal to the policy's
            ``max_attempts``.
        elapsed: Wall-clock seconds spent in the retry call.
    """

    last_error: Exception
    attempts: int
    elapsed: float = 0.0

    ok = False
    cancelled = False

    def unwrap(self) -> NoReturn:
        """Raise a ``RetryError`` chained from the last error.

        Raises:
            RetryError: Always.
        """
        raise RetryError(self) from self.last_error


@dataclass(frozen=True)
class Cancelled:
    """Outcome of a retry call aborted through its cancellation token.

    Attributes:
        attempts: The number of attempts actually made before the
            cancellation was observed.
        last_error: The exception raised by the last attempt, or
            ``None`` if no attempt was made.
        elapsed: Wall-clock seconds spent in the retry call.
    """

    attempts: int
    last_error: Exception | None = None
    elapsed: float = 0.0

    ok = False
    cancelled = True

    def unwrap(self) -> NoReturn:
        """Raise a ``RetryError`` chained from the last error, if any.

        Raises:
            RetryError: Always.
        """
        raise RetryError(self) from self.last_error


RetryOutcome = Union[Success[T], Failure, Cancelled]
