"""Tests for CounterSubscriberClient — reconnect policy with a fake connection (no network)."""

from __future__ import annotations

import json

import pytest
from websockets.exceptions import InvalidURI

from livecounter.client import CounterSubscriberClient


class FakeConnection:
    """Async context manager + async iterator over scripted server frames."""

    def __init__(self, frames: list[str]):
        self._frames = list(frames)
        self.sent: list[str] = []
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True
        return False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._frames:
            raise StopAsyncIteration
        return self._frames.pop(0)

    async def send(self, text):
        self.sent.append(text)

    async def close(self):
        self.closed = True


class ScriptedConnector:
    """Each call returns the next scripted connection, or raises the scripted error."""

    def __init__(self, script: list):
        self._script = list(script)
        self.urls: list[str] = []

    def __call__(self, url):
        self.urls.append(url)
        item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _count(value: int) -> str:
    return json.dumps({"type": "count", "value": value})


def _make_client(script, max_sleeps=None, **kwargs):
    """Client whose sleep() records delays and stops it after *max_sleeps* retries."""
    connector = ScriptedConnector(script)
    sleeps: list[float] = []
    holder: dict = {}

    async def fake_sleep(delay):
        sleeps.append(delay)
        if max_sleeps is not None and len(sleeps) >= max_sleeps:
            await holder["client"].stop()

    client = CounterSubscriberClient(
        "ws://test/ws", connect=connector, sleep=fake_sleep, **kwargs
    )
    holder["client"] = client
    return client, connector, sleeps


@pytest.mark.asyncio
async def test_receives_snapshot_and_updates():
    seen: list[int] = []
    conn = FakeConnection([_count(0), _count(1), _count(2)])
    client, _, _ = _make_client([conn], max_sleeps=1, on_count=seen.append)

    await client.run()

    assert seen == [0, 1, 2]
    assert client.connections == 1


@pytest.mark.asyncio
async def test_reconnects_after_fixed_interval():
    seen: list[int] = []
    script = [
        FakeConnection([_count(3)]),
        FakeConnection([_count(5)]),
        FakeConnection([_count(6)]),
    ]
    client, connector, sleeps = _make_client(
        script, max_sleeps=3, on_count=seen.append, reconnect_interval=2.0
    )

    await client.run()

    assert seen == [3, 5, 6]
    assert sleeps == [2.0, 2.0, 2.0]
    assert connector.urls == ["ws://test/ws"] * 3


@pytest.mark.asyncio
async def test_keeps_retrying_after_connect_failures():
    seen: list[int] = []
    script = [
        ConnectionRefusedError("server down"),
        OSError("network unreachable"),
        TimeoutError(),
        FakeConnection([_count(9)]),
    ]
    client, _, sleeps = _make_client(script, max_sleeps=4, on_count=seen.append)

    await client.run()

    assert seen == [9]
    assert len(sleeps) == 4
    assert len(set(sleeps)) == 1  # no backoff growth


@pytest.mark.asyncio
async def test_handshake_errors_are_retried():
    script = [InvalidURI("ws://test/ws", "bad"), FakeConnection([_count(1)])]
    client, _, sleeps = _make_client(script, max_sleeps=2)

    await client.run()

    assert len(sleeps) == 2


@pytest.mark.asyncio
async def test_cached_value_is_discarded_on_disconnect():
    snapshots: list[int | None] = []
    client, _, _ = _make_client([FakeConnection([_count(4)])])

    async def sleep_and_record(delay):
        snapshots.append(client.value)
        await client.stop()

    client._sleep = sleep_and_record
    await client.run()

    assert snapshots == [None]


@pytest.mark.asyncio
async def test_malformed_server_messages_are_ignored():
    seen: list[int] = []
    conn = FakeConnection(["not json", _count(1), '{"type": "other"}', _count(2)])
    client, _, _ = _make_client([conn], max_sleeps=1, on_count=seen.append)

    await client.run()

    assert seen == [1, 2]


@pytest.mark.asyncio
async def test_increment_without_connection_returns_false():
    client, _, _ = _make_client([])

    assert client.connected is False
    assert await client.increment() is False


class IncrementingConnection(FakeConnection):
    """Asks the client to increment right after each frame is delivered."""

    def __init__(self, frames):
        super().__init__(frames)
        self.client = None
        self.results: list[bool] = []

    async def __anext__(self):
        if self.sent or not self._frames:
            raise StopAsyncIteration
        frame = self._frames.pop(0)
        self.results.append(await self.client.increment())
        return frame


@pytest.mark.asyncio
async def test_increment_sends_command_on_live_connection():
    conn = IncrementingConnection([_count(0)])
    client, _, _ = _make_client([conn], max_sleeps=1)
    conn.client = client

    await client.run()

    assert conn.results == [True]
    assert json.loads(conn.sent[0]) == {"type": "increment"}
