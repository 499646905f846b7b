r"""Unit tests for synchronous retry executor."""

from __future__ import annotations

import threading
import time
from unittest.mock import Mock

import pytest

from aretry import (
    CallbackConfig,
    CancellationToken,
    Cancelled,
    Failure,
    RetryExecutor,
    RetryPolicy,
    Success,
)
from aretry.backoff import ExponentialBackoff, FibonacciBackoff
from aretry.constants import MAX_WAIT_TIME
from tests.helpers import FlakyOperation, RecordingSleep


def test_retry_executor_creation() -> None:
    policy = RetryPolicy(max_attempts=5)
    executor = RetryExecutor(policy)
    assert executor.policy is policy
    assert executor.callbacks is not None


def test_retry_executor_default_policy() -> None:
    assert RetryExecutor().policy == RetryPolicy()


def test_retry_executor_policy_is_read_only() -> None:
    executor = RetryExecutor(RetryPolicy(max_attempts=2))
    with pytest.raises(AttributeError):
        executor.policy = RetryPolicy(max_attempts=9)  # type: ignore[misc]
    assert executor.policy.max_attempts == 2


def test_retry_executor_immediate_success() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=0, value=42)
    outcome = RetryExecutor(RetryPolicy.fixed(1.0), sleep=sleep).execute(operation)

    assert outcome == Success(value=42, attempts=1, elapsed=outcome.elapsed)
    assert operation.calls == 1
    assert sleep.delays == []


@pytest.mark.parametrize("max_attempts", [1, 2, 3, 7])
def test_retry_executor_always_failing(max_attempts: int) -> None:
    """Test that an always-failing operation is called exactly max_attempts times."""
    operation = FlakyOperation(failures=-1)
    outcome = RetryExecutor(
        RetryPolicy.fixed(0.5, max_attempts=max_attempts), sleep=RecordingSleep()
    ).execute(operation)

    assert isinstance(outcome, Failure)
    assert outcome.attempts == max_attempts
    assert operation.calls == max_attempts
    assert isinstance(outcome.last_error, ConnectionError)
    assert str(outcome.last_error) == f"failure {max_attempts}"


@pytest.mark.parametrize(("failures", "max_attempts"), [(1, 3), (2, 3), (4, 5)])
def test_retry_executor_succeeds_on_kth_attempt(failures: int, max_attempts: int) -> None:
    """Test that no extra calls happen once the operation succeeds."""
    operation = FlakyOperation(failures=failures, value="done")
    outcome = RetryExecutor(
        RetryPolicy.fixed(0.5, max_attempts=max_attempts), sleep=RecordingSleep()
    ).execute(operation)

    assert isinstance(outcome, Success)
    assert outcome.value == "done"
    assert outcome.attempts == failures + 1
    assert operation.calls == failures + 1


def test_retry_executor_fixed_wait_total() -> None:
    """Test that waits happen between attempts only, never after the last one."""
    sleep = RecordingSleep()
    RetryExecutor(RetryPolicy.fixed(10.0, max_attempts=3), sleep=sleep).execute(
        FlakyOperation(failures=-1)
    )
    assert sleep.delays == [10.0, 10.0]
    assert sleep.total == 20.0


def test_retry_executor_exponential_wait_sequence() -> None:
    sleep = RecordingSleep()
    RetryExecutor(RetryPolicy.exponential(base_delay=5.0, max_attempts=4), sleep=sleep).execute(
        FlakyOperation(failures=-1)
    )
    assert sleep.delays == [5.0, 10.0, 20.0]


def test_retry_executor_exponential_wait_sequence_capped() -> None:
    sleep = RecordingSleep()
    policy = RetryPolicy.exponential(base_delay=5.0, max_attempts=4, max_delay=15.0)
    RetryExecutor(policy, sleep=sleep).execute(FlakyOperation(failures=-1))
    assert sleep.delays == [5.0, 10.0, 15.0]


def test_retry_executor_single_attempt() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=-1)
    outcome = RetryExecutor(RetryPolicy(max_attempts=1), sleep=sleep).execute(operation)

    assert isinstance(outcome, Failure)
    assert outcome.attempts == 1
    assert operation.calls == 1
    assert sleep.delays == []


def test_retry_executor_zero_wait_does_not_sleep() -> None:
    sleep = RecordingSleep()
    outcome = RetryExecutor(RetryPolicy(max_attempts=4, backoff=None), sleep=sleep).execute(
        FlakyOperation(failures=2)
    )
    assert outcome.ok
    assert sleep.delays == []


def test_retry_executor_uses_time_sleep(mock_sleep: Mock) -> None:
    RetryExecutor(RetryPolicy.fixed(0.25, max_attempts=2)).execute(FlakyOperation(failures=-1))
    mock_sleep.assert_called_once_with(0.25)


def test_retry_executor_any_exception_is_failure() -> None:
    errors = iter([KeyError("a"), RuntimeError("b"), ZeroDivisionError("c")])

    def operation() -> None:
        raise next(errors)

    outcome = RetryExecutor(RetryPolicy(max_attempts=3, backoff=None)).execute(operation)
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.last_error, ZeroDivisionError)


def test_retry_executor_base_exception_propagates() -> None:
    operation = Mock(side_effect=KeyboardInterrupt)
    with pytest.raises(KeyboardInterrupt):
        RetryExecutor(RetryPolicy(max_attempts=3, backoff=None)).execute(operation)
    operation.assert_called_once_with()


def test_retry_executor_forwards_arguments() -> None:
    operation = Mock(return_value=3)
    outcome = RetryExecutor().execute(operation, 1, 2, key="value")
    assert outcome.value == 3
    operation.assert_called_once_with(1, 2, key="value")


def test_retry_executor_forever_policy() -> None:
    operation = FlakyOperation(failures=25)
    outcome = RetryExecutor(RetryPolicy.forever(backoff=None)).execute(operation)
    assert outcome.ok
    assert outcome.attempts == 26


def test_retry_executor_forever_zero_exponential_backoff() -> None:
    """Test a long unbounded run where every wait is zero."""
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=1100)
    outcome = RetryExecutor(
        RetryPolicy.forever(backoff=ExponentialBackoff(base_delay=0.0)), sleep=sleep
    ).execute(operation)

    assert isinstance(outcome, Success)
    assert outcome.attempts == 1101
    assert sleep.delays == []


@pytest.mark.parametrize(
    "backoff", [ExponentialBackoff(base_delay=1.0), FibonacciBackoff(base_delay=1.0)]
)
def test_retry_executor_forever_growing_backoff_stays_finite(backoff: object) -> None:
    """Test that uncapped growth is clamped to a finite wait."""
    sleep = RecordingSleep()
    outcome = RetryExecutor(RetryPolicy.forever(backoff=backoff), sleep=sleep).execute(
        FlakyOperation(failures=1600)
    )

    assert outcome.attempts == 1601
    assert len(sleep.delays) == 1600
    assert sleep.delays[-1] == MAX_WAIT_TIME
    assert max(sleep.delays) == MAX_WAIT_TIME


def test_retry_executor_invalid_backoff_function_delay() -> None:
    """Test that a backoff function returning a negative delay does not abort the loop."""
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=-1)
    policy = RetryPolicy(max_attempts=3, backoff=lambda attempt: 0.0 if attempt == 1 else -1.0)
    outcome = RetryExecutor(policy, sleep=sleep).execute(operation)

    assert isinstance(outcome, Failure)
    assert outcome.attempts == 3
    assert operation.calls == 3
    assert sleep.delays == []


def test_retry_executor_reusable() -> None:
    executor = RetryExecutor(RetryPolicy(max_attempts=2, backoff=None))
    assert executor.execute(FlakyOperation(failures=1)).ok
    assert executor.execute(FlakyOperation(failures=1)).ok
    assert not executor.execute(FlakyOperation(failures=2)).ok


def test_retry_executor_elapsed() -> None:
    outcome = RetryExecutor().execute(lambda: None)
    assert outcome.elapsed >= 0.0


def test_retry_executor_cancelled_before_first_attempt() -> None:
    token = CancellationToken()
    token.cancel()
    operation = Mock()
    outcome = RetryExecutor().execute(operation, cancel_token=token)

    assert outcome == Cancelled(attempts=0, last_error=None, elapsed=outcome.elapsed)
    operation.assert_not_called()


def test_retry_executor_cancelled_during_wait() -> None:
    """Test that cancelling during a long wait aborts the loop promptly."""
    token = CancellationToken()
    operation = FlakyOperation(failures=-1)
    timer = threading.Timer(0.05, token.cancel)
    timer.start()
    start = time.monotonic()
    try:
        outcome = RetryExecutor(RetryPolicy.fixed(30.0, max_attempts=5)).execute(
            operation, cancel_token=token
        )
    finally:
        timer.cancel()

    assert isinstance(outcome, Cancelled)
    assert outcome.attempts == 1
    assert isinstance(outcome.last_error, ConnectionError)
    assert operation.calls == 1
    assert time.monotonic() - start < 5.0


def test_retry_executor_cancelled_by_operation() -> None:
    token = CancellationToken()

    def operation() -> None:
        token.cancel()
        raise ConnectionError("down")

    outcome = RetryExecutor(RetryPolicy.fixed(30.0, max_attempts=5)).execute(
        operation, cancel_token=token
    )
    assert isinstance(outcome, Cancelled)
    assert outcome.attempts == 1


def test_retry_executor_token_not_cancelled() -> None:
    outcome = RetryExecutor(RetryPolicy.fixed(0.01, max_attempts=3)).execute(
        FlakyOperation(failures=1), cancel_token=CancellationToken()
    )
    assert outcome.ok
    assert outcome.attempts == 2


def test_retry_executor_token_wait_replaces_sleep() -> None:
    sleep = RecordingSleep()
    outcome = RetryExecutor(RetryPolicy.fixed(0.01, max_attempts=2), sleep=sleep).execute(
        FlakyOperation(failures=-1), cancel_token=CancellationToken()
    )
    assert isinstance(outcome, Failure)
    assert sleep.delays == []


def test_retry_executor_callbacks_success() -> None:
    on_attempt, on_retry, on_success, on_failure = Mock(), Mock(), Mock(), Mock()
    executor = RetryExecutor(
        RetryPolicy.fixed(2.0, max_attempts=3),
        callbacks=CallbackConfig(
            on_attempt=on_attempt,
            on_retry=on_retry,
            on_success=on_success,
            on_failure=on_failure,
        ),
        sleep=RecordingSleep(),
    )
    executor.execute(FlakyOperation(failures=1, value="v"))

    assert [call.args[0].attempt for call in on_attempt.call_args_list] == [1, 2]
    retry_info = on_retry.call_args.args[0]
    assert retry_info.attempt == 1
    assert retry_info.wait_time == 2.0
    assert retry_info.max_attempts == 3
    assert isinstance(retry_info.error, ConnectionError)
    success_info = on_success.call_args.args[0]
    assert success_info.attempt == 2
    assert success_info.value == "v"
    assert success_info.operation == "FlakyOperation"
    on_failure.assert_not_called()


def test_retry_executor_callbacks_failure(mock_callback: Mock) -> None:
    executor = RetryExecutor(
        RetryPolicy(max_attempts=2, backoff=None),
        callbacks=CallbackConfig(on_failure=mock_callback),
    )
    executor.execute(FlakyOperation(failures=-1))

    info = mock_callback.call_args.args[0]
    assert info.attempt == 2
    assert info.max_attempts == 2
    assert isinstance(info.error, ConnectionError)
    assert info.total_time >= 0.0


def test_retry_executor_callbacks_cancel(mock_callback: Mock) -> None:
    token = CancellationToken()
    token.cancel()
    RetryExecutor(callbacks=CallbackConfig(on_cancel=mock_callback)).execute(
        Mock(), cancel_token=token
    )
    info = mock_callback.call_args.args[0]
    assert info.attempts == 0
    assert info.error is None


def test_retry_executor_callback_error_propagates() -> None:
    executor = RetryExecutor(
        callbacks=CallbackConfig(on_success=Mock(side_effect=RuntimeError("callback")))
    )
    with pytest.raises(RuntimeError, match=r"callback"):
        executor.execute(lambda: 1)


def test_retry_executor_logs_retries(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("DEBUG", logger="aretry"):
        RetryExecutor(RetryPolicy.fixed(0.0, max_attempts=2)).execute(FlakyOperation(failures=-1))
    messages = [record.getMessage() for record in caplog.records]
    assert any("attempt 1/2 failed" in message for message in messages)
    assert any("giving up after 2 attempt(s)" in message for message in messages)
    retry_record = next(record for record in caplog.records if "retrying" in record.getMessage())
    assert retry_record.attempt == 1
    assert retry_record.max_attempts == 2
