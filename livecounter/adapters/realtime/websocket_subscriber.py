"""Starlette WebSocket adapter — implements the Subscriber port."""

from __future__ import annotations

from starlette.websockets import WebSocket, WebSocketState

from livecounter.application.ports.subscriber import Subscriber


class WebSocketSubscriber(Subscriber):
    def __init__(self, websocket: WebSocket):
        self._ws = websocket

    async def send(self, text: str) -> None:
        await self._ws.send_text(text)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        if self._ws.application_state == WebSocketState.DISCONNECTED:
            return
        await self._ws.close(code=code, reason=reason)

    def __repr__(self) -> str:
        client = self._ws.client
        peer = f"{client.host}:{client.port}" if client else "unknown"
        return f"WebSocketSubscriber(peer={peer})"
