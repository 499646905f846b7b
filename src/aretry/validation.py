r"""Parameter validation utilities for retry policies.

This module provides validation functions used when retry policies and
backoff strategies are constructed, so that invalid parameters are
rejected before any operation is executed.
"""

from __future__ import annotations

__all__ = [
    "validate_max_attempts",
    "validate_non_negative",
    "validate_optional_non_negative",
]

import math

from aretry.exceptions import PolicyError


def validate_max_attempts(max_attempts: int | None) -> None:
    """Validate the attempt budget of a retry policy.

    Args:
        max_attempts: Maximum number of attempts. Must be an integer
            ``>= 1``, or ``None`` for an unbounded budget.

    Raises:
        PolicyError: If ``max_attempts`` is not an integer or is lower
            than 1.

    Example:
        ```pycon
        >>> from aretry.validation import validate_max_attempts
        >>> validate_max_attempts(3)
        >>> validate_max_attempts(None)
        >>> validate_max_attempts(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        aretry.exceptions.PolicyError: max_attempts must be >= 1, got 0

        ```
    """
    if max_attempts is None:
        return
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int):
        msg = f"max_attempts must be an integer or None, got {max_attempts!r}"
        raise PolicyError(msg)
    if max_attempts < 1:
        msg = f"max_attempts must be >= 1, got {max_attempts}"
        raise PolicyError(msg)


def validate_non_negative(name: str, value: float) -> None:
    """Validate that a duration or factor is finite and non-negative.

    Args:
        name: The parameter name, used in the error message.
        value: The value to check.

    Raises:
        PolicyError: If ``value`` is NaN, infinite or negative.
    """
    if not math.isfinite(value):
        msg = f"{name} must be a finite number, got {value}"
        raise PolicyError(msg)
    if value < 0:
        msg = f"{name} must be non-negative, got {value}"
        raise PolicyError(msg)


def validate_optional_non_negative(name: str, value: float | None) -> None:
    """Validate an optional duration, skipping the check for ``None``.

    Args:
        name: The parameter name, used in the error message.
        value: The value to check, or ``None``.

    Raises:
        PolicyError: If ``value`` is not ``None`` and is NaN, infinite
            or negative.
    """
    if value is not None:
        validate_non_negative(name, value)
