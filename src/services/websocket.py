"""
WebSocket Connection Manager.
Tracks live connections per identity and sends responses to them.
"""

import logging
import time
from typing import Dict, List

from fastapi import WebSocket

from src.core.protocol import Response

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        # Several connections may share one identity, nothing reconciles them yet
        self.active_connections: Dict[str, List[WebSocket]] = {}

    def __len__(self) -> int:
        return sum(len(sockets) for sockets in self.active_connections.values())

    async def connect(self, websocket: WebSocket, uid: str) -> None:
        """
        Accepts a new WebSocket connection.
        """
        await websocket.accept()
        self.active_connections.setdefault(uid, []).append(websocket)
        logger.info(
            "New connection from: %s (%d for %s)",
            websocket.headers.get("origin"),
            len(self.active_connections[uid]),
            uid,
        )

    def disconnect(self, websocket: WebSocket, uid: str) -> None:
        """
        Removes a WebSocket connection
        """
        if uid in self.active_connections:
            if websocket in self.active_connections[uid]:
                self.active_connections[uid].remove(websocket)

            if not self.active_connections[uid]:
                del self.active_connections[uid]

    async def send(self, websocket: WebSocket, response: Response) -> None:
        """
        Sends a response on one connection, stamped with the current
        epoch time in milliseconds.
        """
        payload = response.to_payload()
        payload["timestamp"] = int(time.time() * 1000)
        await websocket.send_json(payload)


# Singleton instance
manager = ConnectionManager()
