"""
Caller identity resolution.

The API has no real authentication.  The owning user of every task
operation is taken from the optional ``X-User-Id`` request header and
falls back to ``settings.default_user_id`` when the header is absent.
The resolved id is handed to the service layer as an explicit
argument; services never look it up themselves.
"""

from typing import Optional

from fastapi import Header

from .config import settings
from .db import SQLITE_MAX_INTEGER, SQLITE_MIN_INTEGER


def resolve_owner_id(user_id: Optional[int]) -> int:
    """Return ``user_id`` or the configured fallback identity."""
    return user_id if user_id is not None else settings.default_user_id


def get_owner_id(
    x_user_id: Optional[int] = Header(
        None,
        alias="X-User-Id",
        ge=SQLITE_MIN_INTEGER,
        le=SQLITE_MAX_INTEGER,
        description="Identifier of the calling user. Defaults to the fallback identity when omitted.",
    ),
) -> int:
    """FastAPI dependency resolving the owner id of the current request."""
    return resolve_owner_id(x_user_id)
