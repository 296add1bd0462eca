"""
Wire protocol: inbound requests, outbound responses and their codes.

Response code ranges:
    err: 00-09
    id:  10-19
    cr:  20-29
    ls:  30-39
    jn:  40-49
    nm:  50-59
"""

import json
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Command(str, Enum):
    """Commands understood by the broker."""

    ERROR = "err"
    ID = "id"
    NAME = "nm"
    CREATE = "cr"
    JOIN = "jn"
    LIST = "ls"


class ResponseCode(IntEnum):
    """Numeric outcome carried by every response."""

    UNKNOWN_USER = 1
    INVALID_ROOM = 2

    ID_OK = 10

    CREATE_OK = 20
    CREATE_INVALID_ROOM = 21
    CREATE_ROOM_EXISTS = 22

    LIST_OK = 30
    LIST_NO_ROOM = 31
    LIST_ROOM_NOT_FOUND = 32

    JOIN_OK = 40
    JOIN_INVALID_ROOM = 41
    JOIN_ROOM_NOT_FOUND = 42
    JOIN_ALREADY_MEMBER = 43
    JOIN_ROOM_LOCKED = 44

    NAME_OK = 50
    NAME_MISSING = 51
    NAME_UNCHANGED = 52


class MalformedRequest(ValueError):
    """Raised when an inbound frame cannot be turned into a Request."""


class Request(BaseModel):
    """
    Decoded inbound frame.
    Fields are kept as sent, the router checks their types. Only frames
    that are not JSON objects or lack ``cmd`` are malformed.
    """

    model_config = ConfigDict(extra="ignore")

    cmd: Any
    uid: Any = None
    rid: Any = None
    name: Any = None


class PlayerInfo(BaseModel):
    """Public details of a room member."""

    name: str = ""


class MemberListing(BaseModel):
    """Room membership partitioned by role."""

    model_config = ConfigDict(populate_by_name=True)

    spec: List[str] = Field(default_factory=list)
    player: List[str] = Field(default_factory=list)
    host: str
    player_info: Dict[str, PlayerInfo] = Field(default_factory=dict, alias="playerInfo")


class Response(BaseModel):
    """Outbound frame, the timestamp is added by the sender."""

    cmd: Command
    code: ResponseCode
    uid: Optional[str] = None
    data: Optional[MemberListing] = None
    msg: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict with unset fields left out"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def decode_request(raw: str) -> Request:
    """
    Parses a text frame into a Request.

    Raises:
        MalformedRequest: the frame is not a JSON object or has no ``cmd``.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedRequest(f"Could not parse client request: {raw!r}") from e

    if not isinstance(payload, dict) or "cmd" not in payload:
        raise MalformedRequest(f"Invalid client request: {raw!r}")

    return Request.model_validate(payload)
