r"""Retry package implementing the executors.

Public API:
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
    - CallbackManager: Manager for callback invocations
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "CallbackManager", "RetryExecutor"]

from aretry.retry.executor import RetryExecutor
from aretry.retry.executor_async import AsyncRetryExecutor
from aretry.retry.manager import CallbackManager
