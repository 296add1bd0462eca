"""
Unit tests for the WebSocket Connection Manager.
"""

# Disable these false positives as they are caused by pytest syntax
# pylint: disable=redefined-outer-name

import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.protocol import Command, Response, ResponseCode
from src.services.websocket import ConnectionManager


@pytest.fixture
def manager():
    """Fresh manager for each test"""
    return ConnectionManager()


def make_websocket():
    websocket = AsyncMock()
    websocket.headers = MagicMock()
    websocket.headers.get.return_value = "http://localhost"
    return websocket


@pytest.mark.asyncio
async def test_connect_and_disconnect(manager):
    """Test connecting adds to local state and disconnect removes it."""
    websocket = make_websocket()

    await manager.connect(websocket, "abc")

    websocket.accept.assert_awaited_once()
    assert manager.active_connections["abc"] == [websocket]
    assert len(manager) == 1

    manager.disconnect(websocket, "abc")
    assert "abc" not in manager.active_connections
    assert len(manager) == 0


@pytest.mark.asyncio
async def test_connections_sharing_identity(manager):
    """Two connections with the same token are both tracked"""
    first, second = make_websocket(), make_websocket()

    await manager.connect(first, "abc")
    await manager.connect(second, "abc")
    manager.disconnect(first, "abc")

    assert manager.active_connections["abc"] == [second]


def test_disconnect_unknown(manager):
    """Disconnecting something never connected is a no-op"""
    manager.disconnect(make_websocket(), "abc")
    assert not manager.active_connections


@pytest.mark.asyncio
async def test_send_adds_timestamp(manager):
    websocket = make_websocket()
    before = int(time.time() * 1000)

    await manager.send(websocket, Response(cmd=Command.ID, code=ResponseCode.ID_OK, uid="abc"))

    websocket.send_json.assert_awaited_once()
    payload = websocket.send_json.call_args[0][0]
    assert payload["cmd"] == "id"
    assert payload["code"] == 10
    assert payload["uid"] == "abc"
    assert before <= payload["timestamp"] <= int(time.time() * 1000)
