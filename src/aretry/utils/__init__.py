r"""Utility functions for retry logic and logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "calculate_wait_time",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]

from aretry.utils.sleep import calculate_wait_time
from aretry.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
