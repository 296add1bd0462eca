"""In memory session state (users and rooms)"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    """
    Role of a user inside its current room.

    Attributes:
        SPECTATOR: Default role, listed under "spec".
        PLAYER: Active participant, listed under "player".
        HOST: Reported only through the listing's "host" field.
    """

    SPECTATOR = "spec"
    PLAYER = "player"
    HOST = "host"


class SessionState(str, Enum):
    """Where a registered user stands in the session state machine."""

    IDENTIFIED = "identified"
    IN_ROOM = "in_room"


@dataclass
class User:
    """
    Server-side record for one identity token.
    """

    uid: str
    name: str = ""
    room: Optional[str] = None
    role: Role = Role.SPECTATOR

    @property
    def state(self) -> SessionState:
        """Derived state, users without a room are only identified"""
        if self.room is None:
            return SessionState.IDENTIFIED
        return SessionState.IN_ROOM


@dataclass
class Room:
    """
    A named group of users with a host and a lock flag.
    """

    rid: str
    host: str
    # Insertion ordered, unique uids
    members: List[str] = field(default_factory=list)
    locked: bool = False

    def __post_init__(self) -> None:
        if self.host not in self.members:
            self.members.insert(0, self.host)

    def has_member(self, uid: str) -> bool:
        """Checks if uid already belongs to the room"""
        return uid in self.members
