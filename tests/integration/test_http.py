r"""Integration tests for the httpx adapter using a mock transport."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx
import pytest

from aretry import Failure, RetryPolicy, Success
from aretry.http import (
    RETRY_STATUS_CODES,
    RetryableStatusError,
    async_http_operation,
    http_operation,
    request_with_retry,
    request_with_retry_async,
)

if TYPE_CHECKING:
    from collections.abc import Callable

URL = "https://api.example.com/data"

NO_WAIT = RetryPolicy(max_attempts=3, backoff=None)


def make_handler(
    responses: list[int | Exception],
) -> tuple[Callable[[httpx.Request], httpx.Response], list[httpx.Request]]:
    """Create a transport handler answering with the given statuses or errors."""
    requests: list[httpx.Request] = []
    answers = iter(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        answer = next(answers)
        if isinstance(answer, Exception):
            raise answer
        return httpx.Response(answer, json={"attempt": len(requests)})

    return handler, requests


def test_retry_status_codes() -> None:
    assert RETRY_STATUS_CODES == (429, 500, 502, 503, 504)


def test_http_operation_success() -> None:
    handler, requests = make_handler([200])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        response = http_operation(client, "GET", URL)()
    assert response.status_code == 200
    assert len(requests) == 1


def test_http_operation_retryable_status() -> None:
    handler, _ = make_handler([503])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        operation = http_operation(client, "GET", URL)
        with pytest.raises(
            RetryableStatusError, match=r"GET request to .* failed with status 503"
        ) as exc_info:
            operation()
    assert exc_info.value.status_code == 503
    assert exc_info.value.response.status_code == 503


def test_http_operation_non_retryable_status_is_returned() -> None:
    handler, _ = make_handler([404])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        assert http_operation(client, "GET", URL)().status_code == 404


def test_http_operation_custom_forcelist() -> None:
    handler, _ = make_handler([404])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(RetryableStatusError):
            http_operation(client, "GET", URL, status_forcelist=(404,))()


def test_request_with_retry_recovers() -> None:
    handler, requests = make_handler([503, httpx.ConnectError("refused"), 200])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcome = request_with_retry("GET", URL, policy=NO_WAIT, client=client)
    assert isinstance(outcome, Success)
    assert outcome.attempts == 3
    assert outcome.value.json() == {"attempt": 3}
    assert len(requests) == 3


def test_request_with_retry_exhausted() -> None:
    handler, requests = make_handler([500, 502, 504])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcome = request_with_retry("POST", URL, policy=NO_WAIT, client=client, json={"a": 1})
    assert isinstance(outcome, Failure)
    assert outcome.attempts == 3
    assert isinstance(outcome.last_error, RetryableStatusError)
    assert outcome.last_error.status_code == 504
    assert all(request.method == "POST" for request in requests)
    assert json.loads(requests[0].content) == {"a": 1}


def test_request_with_retry_transport_error() -> None:
    handler, _ = make_handler([httpx.ReadTimeout("slow")] * 3)
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcome = request_with_retry("GET", URL, policy=NO_WAIT, client=client)
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.last_error, httpx.ReadTimeout)


def test_request_with_retry_does_not_retry_client_errors() -> None:
    handler, requests = make_handler([400])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcome = request_with_retry("GET", URL, policy=NO_WAIT, client=client)
    assert outcome.ok
    assert outcome.value.status_code == 400
    assert len(requests) == 1


def test_request_with_retry_does_not_close_given_client() -> None:
    handler, _ = make_handler([200])
    client = httpx.Client(transport=httpx.MockTransport(handler))
    request_with_retry("GET", URL, policy=NO_WAIT, client=client)
    assert not client.is_closed
    client.close()


def test_request_with_retry_creates_and_closes_client(monkeypatch: pytest.MonkeyPatch) -> None:
    handler, _ = make_handler([200])
    clients: list[httpx.Client] = []
    client_cls = httpx.Client

    def create_client(**kwargs: object) -> httpx.Client:
        client = client_cls(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    monkeypatch.setattr(httpx, "Client", create_client)
    outcome = request_with_retry("GET", URL, policy=NO_WAIT, timeout=5.0)
    assert outcome.ok
    assert len(clients) == 1
    assert clients[0].is_closed
    assert clients[0].timeout == httpx.Timeout(5.0)


def test_request_with_retry_waits_between_attempts(mock_sleep: Mock) -> None:
    handler, _ = make_handler([429, 429, 200])
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcome = request_with_retry(
            "GET", URL, policy=RetryPolicy.fixed(10.0, max_attempts=3), client=client
        )
    assert outcome.ok
    assert [call.args[0] for call in mock_sleep.call_args_list] == [10.0, 10.0]


@pytest.mark.asyncio
async def test_async_http_operation_retryable_status() -> None:
    handler, _ = make_handler([502])
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(RetryableStatusError):
            await async_http_operation(client, "GET", URL)()


@pytest.mark.asyncio
async def test_request_with_retry_async_recovers() -> None:
    handler, requests = make_handler([500, 200])
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        outcome = await request_with_retry_async("GET", URL, policy=NO_WAIT, client=client)
    assert isinstance(outcome, Success)
    assert outcome.attempts == 2
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_request_with_retry_async_exhausted() -> None:
    handler, _ = make_handler([httpx.ConnectError("refused")] * 3)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        outcome = await request_with_retry_async("GET", URL, policy=NO_WAIT, client=client)
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.last_error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_request_with_retry_async_creates_and_closes_client(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    handler, _ = make_handler([200])
    clients: list[httpx.AsyncClient] = []
    client_cls = httpx.AsyncClient

    def create_client(**kwargs: object) -> httpx.AsyncClient:
        client = client_cls(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    monkeypatch.setattr(httpx, "AsyncClient", create_client)
    outcome = await request_with_retry_async("GET", URL, policy=NO_WAIT)
    assert outcome.ok
    assert clients[0].is_closed
