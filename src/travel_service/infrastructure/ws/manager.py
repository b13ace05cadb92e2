"""In-process registry of authenticated push connections."""
from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import WebSocket

from travel_service.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks open WebSocket connections per user id."""

    def __init__(self) -> None:
        self._connections: dict[int, set[WebSocket]] = {}

    def register(self, ws: WebSocket, user_id: int) -> None:
        self._connections.setdefault(user_id, set()).add(ws)
        logger.debug("WS registered: user=%d (users=%d)", user_id, len(self._connections))

    def disconnect(self, ws: WebSocket, user_id: int) -> None:
        conns = self._connections.get(user_id)
        if conns:
            conns.discard(ws)
            if not conns:
                del self._connections[user_id]
        logger.debug("WS disconnected: user=%d", user_id)

    def is_connected(self, user_id: int) -> bool:
        return bool(self._connections.get(user_id))

    @property
    def connected_users(self) -> list[int]:
        return sorted(self._connections)

    async def send_to_user(self, user_id: int, event_type: str, data: dict[str, Any]) -> None:
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        await self._send_raw(user_id, raw)

    async def send_to_users(
        self,
        user_ids: Iterable[int],
        event_type: str,
        data: dict[str, Any],
    ) -> None:
        """Send one event to every live connection of the given users."""
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        for user_id in set(user_ids):
            await self._send_raw(user_id, raw)

    async def _send_raw(self, user_id: int, raw: str) -> None:
        dead: list[WebSocket] = []
        for ws in list(self._connections.get(user_id, set())):
            try:
                await ws.send_text(raw)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws, user_id)
