"""Realtime endpoint — one WebSocket per viewer, relayed to the counter actor."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket

from livecounter.adapters.realtime.websocket_subscriber import WebSocketSubscriber
from livecounter.application.actors.counter_actor import CounterActor
from livecounter.domain.errors import StorageUnavailableError
from livecounter.infrastructure.api.dependencies import get_counter_actor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

INTERNAL_ERROR = 1011


@router.websocket("/ws")
async def counter_socket(websocket: WebSocket, actor: CounterActor = Depends(get_counter_actor)):
    """Register the connection, then forward frames while it stays registered."""
    await websocket.accept()
    subscriber = WebSocketSubscriber(websocket)

    try:
        await actor.register_subscriber(subscriber)
    except StorageUnavailableError:
        logger.warning("Rejecting %r: counter storage unavailable", subscriber)
        await websocket.close(code=INTERNAL_ERROR, reason="Counter storage unavailable")
        return

    try:
        # The actor drops peers whose deliveries fail; stop relaying for them
        while actor.is_registered(subscriber):
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            await actor.handle_inbound_message(subscriber, raw)
    finally:
        actor.unregister_subscriber(subscriber)

    await _close_dropped(subscriber)


async def _close_dropped(subscriber: WebSocketSubscriber) -> None:
    try:
        await subscriber.close(code=INTERNAL_ERROR, reason="Subscriber dropped")
    except Exception:
        logger.debug("Closing dropped %r failed", subscriber, exc_info=True)
