"""Realtime message protocol — a closed set of tagged JSON messages.

Outbound (server → subscriber):  {"type": "count", "value": <int>}
Inbound  (subscriber → server):  {"type": "increment"}

Anything else is malformed and gets rejected with MalformedMessageError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum

from livecounter.domain.errors import MalformedMessageError


class MessageType(str, Enum):
    COUNT = "count"
    INCREMENT = "increment"


@dataclass(frozen=True)
class CountMessage:
    """Current counter value, pushed as a snapshot or after an increment."""

    value: int

    def to_dict(self) -> dict:
        return {"type": MessageType.COUNT.value, "value": self.value}

    def encode(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class IncrementCommand:
    """Request to add one to the counter."""

    def to_dict(self) -> dict:
        return {"type": MessageType.INCREMENT.value}

    def encode(self) -> str:
        return json.dumps(self.to_dict())


def _load_object(raw: str | bytes) -> dict:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedMessageError("payload is not valid UTF-8", raw) from e
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedMessageError("payload is not valid JSON", raw) from e
    if not isinstance(data, dict):
        raise MalformedMessageError("payload is not a JSON object", raw)
    return data


def parse_inbound(raw: str | bytes) -> IncrementCommand:
    """Parse a message sent by a subscriber.

    The only recognized command is ``{"type": "increment"}``; extra keys are
    tolerated.

    Raises:
        MalformedMessageError: unparseable payload or unrecognized type.
    """
    data = _load_object(raw)
    if data.get("type") == MessageType.INCREMENT.value:
        return IncrementCommand()
    raise MalformedMessageError("unrecognized message type", raw)


def parse_outbound(raw: str | bytes) -> CountMessage:
    """Parse a message pushed by the server (used by the realtime client).

    Raises:
        MalformedMessageError: not a count message, or the value is not a
            non-negative integer.
    """
    data = _load_object(raw)
    if data.get("type") != MessageType.COUNT.value:
        raise MalformedMessageError("unrecognized message type", raw)
    value = data.get("value")
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise MalformedMessageError("count value must be a non-negative integer", raw)
    return CountMessage(value=value)
