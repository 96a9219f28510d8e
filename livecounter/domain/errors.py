"""Domain errors — pure Python, no external dependencies."""


class CounterError(Exception):
    """Base class for all counter service errors."""


class MalformedMessageError(CounterError):
    """An inbound realtime payload could not be understood."""

    def __init__(self, reason: str, raw: str | bytes | None = None):
        self.reason = reason
        self.raw = raw
        super().__init__(f"{reason}: {_preview(raw)}")


class StorageUnavailableError(CounterError):
    """The durable counter store could not complete an operation."""


def _preview(raw: str | bytes | None, limit: int = 80) -> str:
    if raw is None:
        return "<none>"
    text = repr(raw)
    return text if len(text) <= limit else text[: limit - 3] + "..."
