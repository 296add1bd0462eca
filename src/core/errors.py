"""
Domain errors raised by the registries.
The session router translates them into protocol response codes.
"""


class SessionError(Exception):
    """Base class for every recoverable, per-message failure."""


class IdentityNotFound(SessionError):
    """The uid was never issued by the "id" command."""

    def __init__(self, uid: str | None):
        super().__init__(f"Unknown user id: {uid!r}")
        self.uid = uid


class MissingName(SessionError):
    """A name change was requested without a name."""


class SameName(SessionError):
    """The requested name equals the current one."""


class InvalidRoomId(SessionError):
    """The room id does not match the room id grammar."""

    def __init__(self, rid: str | None):
        super().__init__(f"Invalid room id: {rid!r}")
        self.rid = rid


class RoomAlreadyExists(SessionError):
    def __init__(self, rid: str):
        super().__init__(f"Room already exists: {rid}")
        self.rid = rid


class RoomNotFound(SessionError):
    def __init__(self, rid: str | None):
        super().__init__(f"Room not found: {rid!r}")
        self.rid = rid


class AlreadyMember(SessionError):
    def __init__(self, rid: str, uid: str):
        super().__init__(f"{uid} is already a member of {rid}")
        self.rid = rid
        self.uid = uid


class RoomLocked(SessionError):
    def __init__(self, rid: str):
        super().__init__(f"Room is locked: {rid}")
        self.rid = rid
