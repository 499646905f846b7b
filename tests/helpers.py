r"""Shared test helpers for retry executor tests."""

from __future__ import annotations

__all__ = ["AsyncFlakyOperation", "FlakyOperation", "RecordingSleep"]

from typing import Any


class FlakyOperation:
    """Operation failing a fixed number of times before succeeding.

    Args:
        failures: Number of calls that raise before the first success.
            Use a negative value to always fail.
        value: The value returned once the failures are used up.
        error: The exception type raised by failing calls.
    """

    def __init__(
        self, failures: int, value: Any = "ok", error: type[Exception] = ConnectionError
    ) -> None:
        self.failures = failures
        self.value = value
        self.error = error
        self.calls = 0
        self.__qualname__ = "FlakyOperation"

    def _step(self) -> Any:
        self.calls += 1
        if self.failures < 0 or self.calls <= self.failures:
            raise self.error(f"failure {self.calls}")
        return self.value

    def __call__(self) -> Any:
        return self._step()


class AsyncFlakyOperation(FlakyOperation):
    """Coroutine version of ``FlakyOperation``."""

    async def __call__(self) -> Any:
        return self._step()


class RecordingSleep:
    """Sleep function recording the requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, delay: float) -> None:
        self.delays.append(delay)

    @property
    def total(self) -> float:
        return sum(self.delays)
