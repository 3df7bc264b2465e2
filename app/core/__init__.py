"""Core app configuration, database, password/token security and claims."""

from app.core.claims import ClaimsPrincipal, get_user_id
from app.core.config import Settings, get_settings, settings
from app.core.database import get_db
from app.core.security import create_access_token, decode_access_token, hash_password

__all__ = [
    "ClaimsPrincipal",
    "Settings",
    "create_access_token",
    "decode_access_token",
    "get_db",
    "get_settings",
    "get_user_id",
    "hash_password",
    "settings",
]
