"""Users package - account records and storage."""
from __future__ import annotations

from .store import (
    MIN_PASSWORD_LENGTH,
    authenticate,
    create_user,
    get_user,
    get_user_by_email,
    normalize_email,
    update_profile,
    validate_email,
    validate_name,
)
from .types import User, UserPreferences

__all__ = [
    "MIN_PASSWORD_LENGTH",
    "User",
    "UserPreferences",
    "authenticate",
    "create_user",
    "get_user",
    "get_user_by_email",
    "normalize_email",
    "update_profile",
    "validate_email",
    "validate_name",
]
