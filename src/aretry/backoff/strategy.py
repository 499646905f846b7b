r"""Normalisation of backoff specifications."""

from __future__ import annotations

__all__ = ["as_backoff"]

from typing import TYPE_CHECKING

from aretry.backoff.base import BaseBackoffStrategy
from aretry.backoff.function import CallableBackoff
from aretry.backoff.none import NoBackoff

if TYPE_CHECKING:
    from collections.abc import Callable


def as_backoff(
    value: BaseBackoffStrategy | Callable[[int], float] | None,
) -> BaseBackoffStrategy:
    """Convert a backoff specification to a strategy instance.

    Args:
        value: ``None`` (no waiting), a strategy instance, or a function
            mapping the failed attempt number to a delay.

    Returns:
        The corresponding backoff strategy.

    Raises:
        TypeError: If ``value`` is none of the accepted types.

    Example:
        ```pycon
        >>> from aretry.backoff import ConstantBackoff, as_backoff
        >>> as_backoff(None)
        NoBackoff()
        >>> as_backoff(ConstantBackoff(2.0))
        ConstantBackoff(delay=2.0)
        >>> as_backoff(lambda attempt: 1.0).calculate(1)
        1.0

        ```
    """
    if value is None:
        return NoBackoff()
    if isinstance(value, BaseBackoffStrategy):
        return value
    if callable(value):
        return CallableBackoff(value)
    msg = f"backoff must be a BaseBackoffStrategy, a callable or None, got {value!r}"
    raise TypeError(msg)
