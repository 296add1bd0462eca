"""
User registry, maps identity tokens to user state.
"""

import logging
from typing import Any, Dict, Optional

from src.core.errors import IdentityNotFound, MissingName, SameName
from src.core.models import Role, User

logger = logging.getLogger(__name__)


class UserRegistry:
    """In-memory store of every identity seen by the broker."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    def __contains__(self, uid: object) -> bool:
        return uid in self._users

    def __len__(self) -> int:
        return len(self._users)

    def ensure(self, uid: str) -> User:
        """
        Returns the user registered for uid, creating it on first request.
        """
        user = self._users.get(uid)
        if user is None:
            user = User(uid=uid)
            self._users[uid] = user
            logger.info("Registered new user %s", uid)
        return user

    def get(self, uid: Optional[str]) -> User:
        """Lookup only, raises IdentityNotFound for unknown or empty uids"""
        if not uid or uid not in self._users:
            raise IdentityNotFound(uid)
        return self._users[uid]

    def set_name(self, uid: str, name: Any) -> User:
        """
        Changes the display name of a user.

        Raises:
            MissingName: name is empty, absent or not a string.
            SameName: name equals the current one.
        """
        user = self.get(uid)
        if not isinstance(name, str) or not name:
            raise MissingName("Name field is not specified")
        if user.name == name:
            raise SameName("Your current name is already the same")

        user.name = name
        return user

    def set_room_and_role(self, uid: str, rid: str, role: Role) -> User:
        """Moves the user into a room, room side checks must already have passed"""
        user = self.get(uid)
        user.room = rid
        user.role = role
        logger.debug("User %s is now %s in %s", uid, role.value, rid)
        return user
