"""
Session router, the protocol state machine.

A user moves from unidentified (no registry entry) to identified ("id")
to in a room ("cr" or "jn"). Every command checks its preconditions in
order, the first failure wins and leaves the registries untouched.
"""

import logging
from typing import Awaitable, Callable, Dict, Optional

from src.core.errors import (
    AlreadyMember,
    InvalidRoomId,
    MissingName,
    RoomAlreadyExists,
    RoomLocked,
    RoomNotFound,
    SameName,
)
from src.core.models import Role, SessionState
from src.core.protocol import Command, Request, Response, ResponseCode
from src.services.locks import KeyedLock
from src.services.rooms import RoomRegistry, is_valid_room_id
from src.services.users import UserRegistry

logger = logging.getLogger(__name__)

Handler = Callable[[Request, str], Awaitable[Response]]


def _fail(cmd: Command, code: ResponseCode, msg: str) -> Response:
    return Response(cmd=cmd, code=code, msg=msg)


class SessionRouter:
    """
    Validates decoded requests against the registries, mutates them and
    builds the response. The router is the only writer of both registries.
    """

    def __init__(self, users: UserRegistry, rooms: RoomRegistry) -> None:
        self.users = users
        self.rooms = rooms
        # Identity locks are always taken before room locks
        self._identity_locks = KeyedLock()
        self._room_locks = KeyedLock()
        self._handlers: Dict[Command, Handler] = {
            Command.NAME: self._set_name,
            Command.CREATE: self._create_room,
            Command.JOIN: self._join_room,
            Command.LIST: self._list_members,
        }

    async def dispatch(self, request: Request, connection_uid: str) -> Optional[Response]:
        """
        Runs one request.

        Args:
            request (Request): The decoded inbound frame.
            connection_uid (str): Identity token derived for the connection.

        Returns:
            Optional[Response]: The response to send, None for unknown commands.
        """
        if request.cmd == Command.ID.value:
            return await self._identify(connection_uid)

        uid = request.uid
        if not isinstance(uid, str) or uid not in self.users:
            return _fail(
                Command.ERROR,
                ResponseCode.UNKNOWN_USER,
                'UserID is not found. Use "id" command to get your userID.',
            )

        try:
            command = Command(request.cmd)
            handler = self._handlers[command]
        except (ValueError, KeyError):
            logger.debug("Ignoring unknown command %r", request.cmd)
            return None

        return await handler(request, uid)

    async def _identify(self, uid: str) -> Response:
        async with self._identity_locks.hold(uid):
            self.users.ensure(uid)
        return Response(cmd=Command.ID, code=ResponseCode.ID_OK, uid=uid)

    async def _set_name(self, request: Request, uid: str) -> Response:
        async with self._identity_locks.hold(uid):
            try:
                self.users.set_name(uid, request.name)
            except MissingName as e:
                return _fail(Command.NAME, ResponseCode.NAME_MISSING, str(e))
            except SameName as e:
                return _fail(Command.NAME, ResponseCode.NAME_UNCHANGED, str(e))
        return Response(cmd=Command.NAME, code=ResponseCode.NAME_OK)

    @staticmethod
    def _check_room_id(request: Request) -> Optional[Response]:
        """Generic rid check shared by the room commands"""
        if not is_valid_room_id(request.rid):
            return _fail(Command.ERROR, ResponseCode.INVALID_ROOM, "RoomID is not specified or invalid.")
        return None

    async def _create_room(self, request: Request, uid: str) -> Response:
        error = self._check_room_id(request)
        if error:
            return error
        rid = str(request.rid)

        async with self._identity_locks.hold(uid), self._room_locks.hold(rid):
            try:
                self.rooms.create(rid, uid)
            except InvalidRoomId:
                return _fail(Command.CREATE, ResponseCode.CREATE_INVALID_ROOM, "Invalid RoomID")
            except RoomAlreadyExists:
                return _fail(
                    Command.CREATE,
                    ResponseCode.CREATE_ROOM_EXISTS,
                    'This roomID is already in use. Use "jn" command to request to join',
                )
            self.users.set_room_and_role(uid, rid, Role.SPECTATOR)

        return Response(cmd=Command.CREATE, code=ResponseCode.CREATE_OK)

    async def _join_room(self, request: Request, uid: str) -> Response:
        error = self._check_room_id(request)
        if error:
            return error
        rid = str(request.rid)

        async with self._identity_locks.hold(uid), self._room_locks.hold(rid):
            try:
                self.rooms.join(rid, uid)
            except InvalidRoomId:
                return _fail(Command.JOIN, ResponseCode.JOIN_INVALID_ROOM, "Invalid RoomID")
            except RoomNotFound:
                return _fail(Command.JOIN, ResponseCode.JOIN_ROOM_NOT_FOUND, "No room found")
            except AlreadyMember:
                return _fail(Command.JOIN, ResponseCode.JOIN_ALREADY_MEMBER, "Already in room")
            except RoomLocked:
                return _fail(Command.JOIN, ResponseCode.JOIN_ROOM_LOCKED, "This room is locked ATM")
            self.users.set_room_and_role(uid, rid, Role.SPECTATOR)

        # TODO: disconnect every other connection of this identity once
        # multi-connection conflicts are resolved
        return Response(cmd=Command.JOIN, code=ResponseCode.JOIN_OK)

    async def _list_members(self, request: Request, uid: str) -> Response:
        user = self.users.get(uid)
        if user.state is not SessionState.IN_ROOM or user.room is None:
            return _fail(Command.LIST, ResponseCode.LIST_NO_ROOM, "You are not in a room")
        rid = user.room

        async with self._room_locks.hold(rid):
            try:
                listing = self.rooms.list_members(rid, self.users)
            except RoomNotFound:
                logger.error("User %s points at missing room %s", uid, rid)
                return _fail(Command.LIST, ResponseCode.LIST_ROOM_NOT_FOUND, "No room found")

        return Response(cmd=Command.LIST, code=ResponseCode.LIST_OK, data=listing)


# Singleton instance
session_router = SessionRouter(UserRegistry(), RoomRegistry())
