"""
Room registry, maps room ids to room state.
"""

import logging
import re
from typing import Dict, Optional

from src.config.settings import settings
from src.core.errors import AlreadyMember, InvalidRoomId, RoomAlreadyExists, RoomLocked, RoomNotFound
from src.core.models import Role, Room
from src.core.protocol import MemberListing, PlayerInfo
from src.services.users import UserRegistry

logger = logging.getLogger(__name__)

ROOM_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_room_id(rid: Optional[str]) -> bool:
    """Room ids are 1 to ``room_id_max_length`` letters, digits, '_' or '-'."""
    if not isinstance(rid, str) or not rid:
        return False
    if len(rid) > settings.room_id_max_length:
        return False
    return ROOM_ID_PATTERN.match(rid) is not None


class RoomRegistry:
    """In-memory store of rooms. Rooms live as long as the process."""

    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}

    def __contains__(self, rid: object) -> bool:
        return rid in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def get(self, rid: Optional[str]) -> Room:
        """Returns the room registered under rid"""
        if rid is None or rid not in self._rooms:
            raise RoomNotFound(rid)
        return self._rooms[rid]

    def create(self, rid: str, host: str) -> Room:
        """
        Registers a new room with host as its only member.

        Raises:
            InvalidRoomId: rid does not match the room id grammar.
            RoomAlreadyExists: rid is taken, the existing room is untouched.
        """
        if not is_valid_room_id(rid):
            raise InvalidRoomId(rid)
        if rid in self._rooms:
            raise RoomAlreadyExists(rid)

        room = Room(rid=rid, host=host)
        self._rooms[rid] = room
        logger.info("Room %s created by %s", rid, host)
        return room

    def join(self, rid: str, uid: str) -> Room:
        """
        Appends uid to the members of an existing room.

        Raises:
            InvalidRoomId, RoomNotFound, AlreadyMember, RoomLocked
            (checked in this order).
        """
        if not is_valid_room_id(rid):
            raise InvalidRoomId(rid)
        room = self.get(rid)
        if room.has_member(uid):
            raise AlreadyMember(room.rid, uid)
        if room.locked:
            raise RoomLocked(room.rid)

        room.members.append(uid)
        logger.info("%s joined room %s (%d members)", uid, room.rid, len(room.members))
        return room

    def set_locked(self, rid: str, locked: bool = True) -> Room:
        """Opens or closes a room to new members, no client command reaches it yet"""
        room = self.get(rid)
        room.locked = locked
        return room

    def list_members(self, rid: Optional[str], users: UserRegistry) -> MemberListing:
        """
        Partitions the members of a room by their current role,
        keeping insertion order.
        """
        room = self.get(rid)
        listing = MemberListing(host=room.host)

        for uid in room.members:
            user = users.get(uid)
            if user.role is Role.PLAYER:
                listing.player.append(uid)
            elif user.role is Role.SPECTATOR:
                listing.spec.append(uid)
            listing.player_info[uid] = PlayerInfo(name=user.name)

        return listing
