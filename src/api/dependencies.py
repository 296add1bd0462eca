"""
FastAPI dependencies for connection identity and shared services.
"""

from fastapi import WebSocket

from src.core.identity import resolve_identity
from src.services.router import SessionRouter, session_router
from src.services.websocket import ConnectionManager, manager


def get_session_router() -> SessionRouter:
    """Returns the process-wide session router"""
    return session_router


def get_connection_manager() -> ConnectionManager:
    """Returns the process-wide connection manager"""
    return manager


async def get_connection_uid(websocket: WebSocket) -> str:
    """
    Derives the identity token of a connection from its handshake headers.
    """
    return resolve_identity(websocket.headers.get("origin"), websocket.headers.get("user-agent"))
