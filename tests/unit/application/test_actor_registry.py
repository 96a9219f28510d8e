"""Tests for ActorRegistry."""

import asyncio

import pytest

from livecounter.application.actors.registry import ActorRegistry
from livecounter.application.ports.counter_store import CounterStore


class MemoryStore(CounterStore):
    def __init__(self):
        self.value = 0

    async def get(self):
        return self.value

    async def put(self, value):
        self.value = value


class RecordingFactory:
    def __init__(self):
        self.calls: list[str] = []
        self.stores: dict[str, MemoryStore] = {}

    def __call__(self, name: str) -> MemoryStore:
        self.calls.append(name)
        store = MemoryStore()
        self.stores[name] = store
        return store


def test_actor_is_created_lazily():
    factory = RecordingFactory()
    registry = ActorRegistry(store_factory=factory)

    assert factory.calls == []
    assert registry.peek("global-counter") is None

    actor = registry.get("global-counter")

    assert actor.name == "global-counter"
    assert factory.calls == ["global-counter"]
    assert registry.peek("global-counter") is actor


def test_same_name_returns_same_actor():
    factory = RecordingFactory()
    registry = ActorRegistry(store_factory=factory)

    assert registry.get("global-counter") is registry.get("global-counter")
    assert factory.calls == ["global-counter"]


@pytest.mark.asyncio
async def test_concurrent_first_access_creates_one_actor():
    factory = RecordingFactory()
    registry = ActorRegistry(store_factory=factory)

    async def resolve():
        await asyncio.sleep(0)
        return registry.get("global-counter")

    actors = await asyncio.gather(*(resolve() for _ in range(10)))

    assert all(a is actors[0] for a in actors)
    assert factory.calls == ["global-counter"]


@pytest.mark.asyncio
async def test_actor_uses_store_from_factory():
    factory = RecordingFactory()
    registry = ActorRegistry(store_factory=factory)

    await registry.get("global-counter").increment_and_broadcast()

    assert factory.stores["global-counter"].value == 1


@pytest.mark.asyncio
async def test_shutdown_forgets_actors():
    registry = ActorRegistry(store_factory=RecordingFactory())
    first = registry.get("global-counter")

    await registry.shutdown()

    assert registry.peek("global-counter") is None
    assert registry.get("global-counter") is not first
