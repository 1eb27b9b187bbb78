"""Regression tests for job event WebSocket reconnection behavior."""

from __future__ import annotations

import pytest

from job_submission.adapters import IDLE_TIMEOUT_CLOSE_CODE, JobEventSubscription


class _FakeWebSocket:
    """Scripted WebSocket yielding fixed messages and then closing with a code."""

    def __init__(self, messages: list[str], close_code: int):
        self._messages = list(messages)
        self.close_code = close_code

    def __aiter__(self) -> _FakeWebSocket:
        return self

    async def __anext__(self) -> str:
        if not self._messages:
            raise StopAsyncIteration
        return self._messages.pop(0)


class _FakeConnection:
    """Async context manager handing out one scripted socket."""

    def __init__(self, websocket: _FakeWebSocket):
        self._websocket = websocket

    async def __aenter__(self) -> _FakeWebSocket:
        return self._websocket

    async def __aexit__(self, *exc_info: object) -> None:
        return None


class _FakeConnector:
    """Connection factory replaying scripted sockets in order."""

    def __init__(self, sockets: list[_FakeWebSocket]):
        """Initialize connector with scripted sockets.

        Args:
            sockets: Sockets returned by successive connections.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: This stub does not raise value errors.
        """

        self._sockets = list(sockets)
        self.urls: list[str] = []

    def connector_add(self, websocket: _FakeWebSocket) -> None:
        self._sockets.append(websocket)

    def __call__(self, url: str) -> _FakeConnection:
        self.urls.append(url)
        if not self._sockets:
            raise OSError("connection refused")
        return _FakeConnection(self._sockets.pop(0))


async def _collect(stream) -> list[object]:
    return [message async for message in stream]


@pytest.mark.asyncio
async def test_adapters_job_events_reconnect_after_idle_timeout_close() -> None:
    """Reconnect transparently on close code 1001 and stop on any other code.

    Returns:
        None: Assertions validate reconnection policy.

    Raises:
        AssertionError: Raised when reconnection policy is incorrect.
    """

    connector = _FakeConnector(
        [
            _FakeWebSocket(['{"jobId": "job-1", "newStatus": "running"}'], IDLE_TIMEOUT_CLOSE_CODE),
            _FakeWebSocket(['{"jobId": "job-1", "newStatus": "finished"}', "not-json"], 1006),
        ]
    )
    subscription = JobEventSubscription("wss://jobs.test/api/v1/jobs/events", connect=connector)

    messages = await _collect(subscription.subscription_events())

    assert messages == [
        {"jobId": "job-1", "newStatus": "running"},
        {"jobId": "job-1", "newStatus": "finished"},
    ]
    assert subscription.subscription_connection_count() == 2
    assert subscription.subscription_reconnect_required() is True


@pytest.mark.asyncio
async def test_adapters_job_events_explicit_reconnect_clears_flag() -> None:
    """Require an explicit reconnect after a failed connection attempt.

    Returns:
        None: Assertions validate the persistent reconnect flag.

    Raises:
        AssertionError: Raised when the flag is not managed correctly.
    """

    connector = _FakeConnector([])
    subscription = JobEventSubscription("wss://jobs.test/api/v1/jobs/events", connect=connector)

    assert await _collect(subscription.subscription_events()) == []
    assert subscription.subscription_reconnect_required() is True

    connector.connector_add(_FakeWebSocket(['{"ok": true}'], 1000))
    stream = subscription.subscription_reconnect()

    assert subscription.subscription_reconnect_required() is False
    assert await _collect(stream) == [{"ok": True}]
    assert subscription.subscription_reconnect_required() is True
    assert connector.urls == ["wss://jobs.test/api/v1/jobs/events"] * 2


def test_adapters_job_events_rejects_blank_url() -> None:
    with pytest.raises(ValueError, match="url must not be blank"):
        JobEventSubscription("  ")
