"""Core functionality for Autoflow Builder."""

from .config import get_settings, settings
from .database import get_db, get_session_maker
from .security import (
    CurrentUser,
    get_current_user,
    get_current_user_optional,
    create_access_token,
)

__all__ = [
    "get_settings",
    "settings",
    "get_db",
    "get_session_maker",
    "CurrentUser",
    "get_current_user",
    "get_current_user_optional",
    "create_access_token",
]
