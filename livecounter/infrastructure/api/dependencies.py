"""FastAPI dependency injection — wires the store adapter into the actor."""

from __future__ import annotations

from fastapi import Depends

from livecounter.adapters.persistence.database import async_session_factory
from livecounter.adapters.persistence.repositories import SqlCounterStore, counter_storage_key
from livecounter.application.actors.counter_actor import CounterActor
from livecounter.application.actors.registry import ActorRegistry
from livecounter.config import settings


def _make_store(counter_name: str) -> SqlCounterStore:
    return SqlCounterStore(
        async_session_factory,
        counter_storage_key(counter_name, settings.counter_key),
    )


# Singleton registry: one actor per counter name for the whole process
_registry = ActorRegistry(
    store_factory=_make_store,
    send_timeout=settings.send_timeout_seconds,
)


def get_actor_registry() -> ActorRegistry:
    return _registry


def get_counter_actor(registry: ActorRegistry = Depends(get_actor_registry)) -> CounterActor:
    return registry.get(settings.counter_name)


def get_health_store() -> SqlCounterStore:
    return _make_store(settings.counter_name)
