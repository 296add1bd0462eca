"""
Identity derivation from connection metadata.

The token is an identification shortcut, not a credential: two clients
sharing the same origin and user agent resolve to the same identity.
"""

import hashlib
from typing import Optional

from src.config.settings import settings

SEPARATOR = "=>"


def resolve_identity(origin: Optional[str], user_agent: Optional[str]) -> str:
    """
    Derive a stable identity token from the origin and user-agent headers.

    Args:
        origin (Optional[str]): Value of the Origin header, if any.
        user_agent (Optional[str]): Value of the User-Agent header, if any.

    Returns:
        str: Hex token truncated to ``settings.user_id_length`` characters.
    """
    raw = f"{origin or ''}{SEPARATOR}{user_agent or ''}"
    # MD5 is fine here, collisions are an accepted risk
    digest = hashlib.md5(raw.encode("utf-8"), usedforsecurity=False).hexdigest()
    return digest[: settings.user_id_length]
