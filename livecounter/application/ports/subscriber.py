"""Port interface for a live push channel to one viewer."""

from abc import ABC, abstractmethod


class Subscriber(ABC):
    """Opaque connection handle.

    Instances are compared by identity: each accepted connection is one
    member of the broadcast set, no matter what it is connected to.
    """

    @abstractmethod
    async def send(self, text: str) -> None:
        """Deliver an already-encoded message. Raises on a broken channel."""
        ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None:
        ...
