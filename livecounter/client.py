"""Reconnecting realtime client for the counter WebSocket.

Usage:
    python -m livecounter.client ws://localhost:8000/ws
    python -m livecounter.client ws://localhost:8000/ws --interval 5

Policy: after a lost or failed connection, wait a fixed interval and try
again, forever. The first message on every new connection is the snapshot
and replaces whatever value was cached before.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable

import websockets
from websockets.exceptions import WebSocketException

from livecounter.config import settings
from livecounter.domain.errors import MalformedMessageError
from livecounter.domain.messages import IncrementCommand, parse_outbound
from livecounter.logging_config import configure_logging

logger = logging.getLogger(__name__)


class CounterSubscriberClient:
    """Keeps a live view of the shared counter.

    Args:
        url: realtime endpoint, e.g. ``ws://localhost:8000/ws``.
        on_count: called with every value received, snapshot included.
        reconnect_interval: fixed delay between attempts (seconds).
        connect: WebSocket connect factory; defaults to ``websockets.connect``.
        sleep: awaitable delay; defaults to ``asyncio.sleep``.
    """

    def __init__(
        self,
        url: str,
        on_count: Callable[[int], None] | None = None,
        reconnect_interval: float | None = None,
        connect=websockets.connect,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._url = url
        self._on_count = on_count
        self._interval = (
            settings.reconnect_interval_seconds if reconnect_interval is None else reconnect_interval
        )
        self._connect = connect
        self._sleep = sleep
        self._ws = None
        self._stopped = False
        self.value: int | None = None
        self.connections = 0

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def run(self) -> None:
        """Connect and follow updates until stop() is called."""
        while not self._stopped:
            try:
                async with self._connect(self._url) as ws:
                    self._ws = ws
                    self.connections += 1
                    logger.info("Connected to %s", self._url)
                    async for raw in ws:
                        self._handle(raw)
                logger.info("Connection to %s closed", self._url)
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.warning("Connection to %s lost: %s", self._url, e)
            finally:
                self._ws = None
                # Next snapshot is authoritative
                self.value = None

            if self._stopped:
                break
            logger.info("Reconnecting in %.1fs", self._interval)
            await self._sleep(self._interval)

    async def increment(self) -> bool:
        """Send an increment command; False if there is no live connection."""
        ws = self._ws
        if ws is None:
            return False
        await ws.send(IncrementCommand().encode())
        return True

    async def stop(self) -> None:
        self._stopped = True
        if self._ws is not None:
            await self._ws.close()

    def _handle(self, raw: str | bytes) -> None:
        try:
            message = parse_outbound(raw)
        except MalformedMessageError as e:
            logger.warning("Ignoring server message: %s", e)
            return
        self.value = message.value
        if self._on_count is not None:
            self._on_count(message.value)


def main():
    parser = argparse.ArgumentParser(description="Follow the shared counter")
    parser.add_argument("url", help="Realtime endpoint, e.g. ws://localhost:8000/ws")
    parser.add_argument(
        "--interval", type=float, default=None,
        help="Reconnect interval in seconds (default: RECONNECT_INTERVAL_SECONDS)",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)
    client = CounterSubscriberClient(
        args.url,
        on_count=lambda value: print(value, flush=True),
        reconnect_interval=args.interval,
    )
    try:
        asyncio.run(client.run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
