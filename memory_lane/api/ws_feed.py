"""WebSocket endpoint for partner notifications.

Path: /ws/feed/{user_id}

Server → client only.  A {"event": "connected"} frame confirms the socket is
registered; after that the client receives memory_created events.  Incoming
frames are read and ignored so the socket notices disconnects.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from memory_lane.services.connection_manager import ConnectionManager

logger = logging.getLogger(__name__)


def create_feed_router(connections: ConnectionManager) -> APIRouter:
    router = APIRouter()

    @router.websocket("/ws/feed/{user_id}")
    async def feed(websocket: WebSocket, user_id: str) -> None:
        await connections.connect(user_id, websocket)
        logger.info("Feed client connected for user %s", user_id)
        try:
            await websocket.send_json({"event": "connected", "user_id": user_id})
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Feed client disconnected for user %s", user_id)
        finally:
            connections.disconnect(user_id, websocket)

    return router
