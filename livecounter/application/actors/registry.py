"""ActorRegistry — resolves counter actors by logical name."""

from __future__ import annotations

import logging
from collections.abc import Callable

from livecounter.application.actors.counter_actor import DEFAULT_SEND_TIMEOUT, CounterActor
from livecounter.application.ports.counter_store import CounterStore

logger = logging.getLogger(__name__)


class ActorRegistry:
    """Creates each named actor lazily on first access and keeps it.

    ``get`` has no await point, so two coroutines asking for the same name
    always end up with the same instance.
    """

    def __init__(
        self,
        store_factory: Callable[[str], CounterStore],
        send_timeout: float = DEFAULT_SEND_TIMEOUT,
    ):
        self._store_factory = store_factory
        self._send_timeout = send_timeout
        self._actors: dict[str, CounterActor] = {}

    def get(self, name: str) -> CounterActor:
        actor = self._actors.get(name)
        if actor is None:
            actor = CounterActor(
                name=name,
                store=self._store_factory(name),
                send_timeout=self._send_timeout,
            )
            self._actors[name] = actor
            logger.info("Counter actor %s created", name)
        return actor

    def peek(self, name: str) -> CounterActor | None:
        """Return the actor if it already exists, without creating it."""
        return self._actors.get(name)

    async def shutdown(self) -> None:
        actors = list(self._actors.values())
        self._actors.clear()
        for actor in actors:
            await actor.shutdown()
