"""Port interface for durable counter persistence."""

from abc import ABC, abstractmethod


class CounterStore(ABC):
    @abstractmethod
    async def get(self) -> int:
        """Return the persisted value, or 0 if nothing has been stored yet.

        Raises StorageUnavailableError if the backend cannot be read.
        """
        ...

    @abstractmethod
    async def put(self, value: int) -> None:
        """Durably persist *value* before returning.

        A failure must leave either the old or the new value in place.
        Raises StorageUnavailableError if the backend cannot be written.
        """
        ...
