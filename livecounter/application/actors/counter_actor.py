"""CounterActor — the single writer for one named counter.

Every operation touching the store's value or the subscriber set runs under
the actor's lock, so increments apply strictly one after another and each
subscriber sees values in commit order:

1. read the persisted value
2. persist value + 1
3. push {"type": "count", "value": value + 1} to every subscriber

Each send is bounded by ``send_timeout``; a peer that fails or stalls is
dropped. Storage failures propagate to the caller and are never retried here.
"""

from __future__ import annotations

import asyncio
import logging

from livecounter.application.ports.counter_store import CounterStore
from livecounter.application.ports.subscriber import Subscriber
from livecounter.domain.errors import MalformedMessageError, StorageUnavailableError
from livecounter.domain.messages import CountMessage, IncrementCommand, parse_inbound

logger = logging.getLogger(__name__)

GOING_AWAY = 1001
DEFAULT_SEND_TIMEOUT = 5.0


class CounterActor:
    """Owns one counter value and the set of connections watching it."""

    def __init__(self, name: str, store: CounterStore, send_timeout: float = DEFAULT_SEND_TIMEOUT):
        self.name = name
        self._store = store
        self._send_timeout = send_timeout
        self._lock = asyncio.Lock()
        self._subscribers: set[Subscriber] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def is_registered(self, subscriber: Subscriber) -> bool:
        return subscriber in self._subscribers

    # ─── Counter operations ─────────────────────────────────────────

    async def increment_and_broadcast(self) -> int:
        """Add one to the persisted value, push it to everyone, return it.

        Raises:
            StorageUnavailableError: the value could not be read or written.
                Nothing is broadcast in that case.
        """
        async with self._lock:
            current = await self._store.get()
            new_value = current + 1
            await self._store.put(new_value)
            logger.debug("Counter %s: %d -> %d", self.name, current, new_value)
            await self._broadcast_locked(CountMessage(value=new_value))
            return new_value

    async def get_value(self) -> int:
        """Last committed value. Does not wait for in-flight increments."""
        return await self._store.get()

    # ─── Subscriber lifecycle ───────────────────────────────────────

    async def register_subscriber(self, subscriber: Subscriber) -> None:
        """Add *subscriber* to the broadcast set and send it a snapshot.

        The snapshot is sent while the lock is held, so it always arrives
        before any later broadcast. If it cannot be delivered the subscriber
        is left unregistered; callers check ``is_registered``.

        Raises:
            StorageUnavailableError: the current value could not be read;
                the subscriber is not registered.
        """
        async with self._lock:
            value = await self._store.get()
            self._subscribers.add(subscriber)
            if not await self._deliver(subscriber, CountMessage(value=value).encode()):
                self._subscribers.discard(subscriber)
                return
            logger.info(
                "Counter %s: subscriber registered (%d connected)",
                self.name, len(self._subscribers),
            )

    def unregister_subscriber(self, subscriber: Subscriber) -> None:
        """Remove *subscriber*; a no-op if it is already gone."""
        if subscriber in self._subscribers:
            self._subscribers.discard(subscriber)
            logger.info(
                "Counter %s: subscriber unregistered (%d connected)",
                self.name, len(self._subscribers),
            )

    async def handle_inbound_message(self, subscriber: Subscriber, raw: str | bytes) -> None:
        """Apply a message received on a realtime connection.

        Malformed payloads are logged and dropped. The connection stays open
        and the counter is untouched.
        """
        try:
            command = parse_inbound(raw)
        except MalformedMessageError as e:
            logger.warning("Counter %s: dropping inbound message (%s)", self.name, e)
            return

        if isinstance(command, IncrementCommand):
            try:
                await self.increment_and_broadcast()
            except StorageUnavailableError:
                # No response channel for realtime increments; keep the socket.
                logger.exception("Counter %s: realtime increment failed", self.name)

    # ─── Fan-out ────────────────────────────────────────────────────

    async def broadcast(self, message: CountMessage) -> None:
        async with self._lock:
            await self._broadcast_locked(message)

    async def _broadcast_locked(self, message: CountMessage) -> None:
        text = message.encode()
        subscribers = list(self._subscribers)
        delivered = await asyncio.gather(*(self._deliver(s, text) for s in subscribers))
        for subscriber, ok in zip(subscribers, delivered):
            if not ok:
                self.unregister_subscriber(subscriber)

    async def _deliver(self, subscriber: Subscriber, text: str) -> bool:
        """Send with a deadline; False if the peer failed or stalled."""
        try:
            await asyncio.wait_for(subscriber.send(text), timeout=self._send_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Counter %s: delivery to %r timed out after %.1fs, dropping subscriber",
                self.name, subscriber, self._send_timeout,
            )
            return False
        except Exception:
            logger.warning(
                "Counter %s: delivery to %r failed, dropping subscriber",
                self.name, subscriber,
                exc_info=True,
            )
            return False
        return True

    async def shutdown(self) -> None:
        """Close every live connection and empty the broadcast set."""
        async with self._lock:
            subscribers = list(self._subscribers)
            self._subscribers.clear()
        for subscriber in subscribers:
            try:
                await asyncio.wait_for(
                    subscriber.close(code=GOING_AWAY, reason="Counter is shutting down"),
                    timeout=self._send_timeout,
                )
            except Exception:
                logger.debug("Counter %s: close on shutdown failed", self.name, exc_info=True)
        if subscribers:
            logger.info("Counter %s: closed %d subscribers", self.name, len(subscribers))
