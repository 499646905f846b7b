r"""Backoff strategies for retry delays.

This package provides the wait strategies used between attempts: no
wait, constant, linear, exponential and Fibonacci backoff, and a
function-backed strategy for custom schedules.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "CallableBackoff",
    "ConstantBackoff",
    "ExponentialBackoff",
    "FibonacciBackoff",
    "LinearBackoff",
    "NoBackoff",
    "as_backoff",
]

from aretry.backoff.base import BaseBackoffStrategy
from aretry.backoff.constant import ConstantBackoff
from aretry.backoff.exponential import ExponentialBackoff
from aretry.backoff.fibonacci import FibonacciBackoff
from aretry.backoff.function import CallableBackoff
from aretry.backoff.linear import LinearBackoff
from aretry.backoff.none import NoBackoff
from aretry.backoff.strategy import as_backoff
