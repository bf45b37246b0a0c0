"""Manages per-user WebSocket connections for partner notifications."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks open feed sockets by user id.  A user may have several tabs open."""

    def __init__(self) -> None:
        self._connections: dict[str, list[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.setdefault(user_id, []).append(websocket)

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        sockets = self._connections.get(user_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self._connections.pop(user_id, None)

    @property
    def active_count(self) -> int:
        return sum(len(sockets) for sockets in self._connections.values())

    async def send_to(self, user_id: str, data: dict[str, Any]) -> int:
        """Send a JSON payload to every socket of *user_id*.  Returns deliveries.

        Sockets that fail to send are dropped; delivery is best-effort.
        """
        delivered = 0
        for ws in list(self._connections.get(user_id, [])):
            try:
                await ws.send_json(data)
                delivered += 1
            except Exception as exc:
                logger.warning("Dropping feed socket for user %s: %s", user_id, exc)
                self.disconnect(user_id, ws)
        return delivered
