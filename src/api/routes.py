"""
API Routes definition.
Handles the health check and the real-time session WebSocket.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from src.api.dependencies import get_connection_manager, get_connection_uid, get_session_router
from src.core.protocol import MalformedRequest, decode_request
from src.services.router import SessionRouter
from src.services.websocket import ConnectionManager

logger = logging.getLogger(__name__)

router = APIRouter()

ws_router = APIRouter()


@router.get("/health")
async def health_check(
    session: SessionRouter = Depends(get_session_router),
    connections: ConnectionManager = Depends(get_connection_manager),
) -> Dict[str, Any]:
    """Returns the broker status"""
    return {
        "status": "online",
        "users": len(session.users),
        "rooms": len(session.rooms),
        "connections": len(connections),
    }


@ws_router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    uid: str = Depends(get_connection_uid),
    session: SessionRouter = Depends(get_session_router),
    connections: ConnectionManager = Depends(get_connection_manager),
) -> None:
    """
    Session endpoint.
    Every text frame is one command, answered on the same connection.
    Malformed frames and unknown commands get no answer.
    """
    await connections.connect(websocket, uid)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                request = decode_request(raw)
            except MalformedRequest as e:
                logger.warning("%s", e)
                continue

            response = await session.dispatch(request, uid)
            if response is not None:
                await connections.send(websocket, response)
    except WebSocketDisconnect:
        logger.info("Connection closed for %s", uid)
    finally:
        connections.disconnect(websocket, uid)
