"""User record."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..dates import isoformat, parse_timestamp, utcnow


@dataclass(slots=True)
class UserPreferences:
    theme: str = "light"  # "light" or "dark"
    notifications: bool = True
    email_notifications: bool = True
    language: str = "en"
    timezone: str = "UTC"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme,
            "notifications": self.notifications,
            "email_notifications": self.email_notifications,
            "language": self.language,
            "timezone": self.timezone,
        }

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme,
            "notifications": self.notifications,
            "emailNotifications": self.email_notifications,
            "language": self.language,
            "timezone": self.timezone,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserPreferences":
        data = data or {}
        return cls(
            theme=data.get("theme", "light"),
            notifications=data.get("notifications", True),
            email_notifications=data.get(
                "email_notifications", data.get("emailNotifications", True)
            ),
            language=data.get("language", "en"),
            timezone=data.get("timezone", "UTC"),
        )


@dataclass(slots=True)
class User:
    """A registered account. ``password_hash`` never leaves the server."""

    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    avatar: str = ""
    bio: str = ""
    preferences: UserPreferences = field(default_factory=UserPreferences)
    is_email_verified: bool = False
    last_login: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "avatar": self.avatar,
            "bio": self.bio,
            "preferences": self.preferences.to_dict(),
            "is_email_verified": self.is_email_verified,
            "last_login": isoformat(self.last_login),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            password_hash=data.get("password_hash", ""),
            avatar=data.get("avatar") or "",
            bio=data.get("bio") or "",
            preferences=UserPreferences.from_dict(data.get("preferences")),
            is_email_verified=data.get("is_email_verified", False),
            last_login=parse_timestamp(data.get("last_login")),
            created_at=parse_timestamp(data.get("created_at")) or utcnow(),
            updated_at=parse_timestamp(data.get("updated_at")) or utcnow(),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        """Wire form (camelCase), without the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "bio": self.bio,
            "preferences": self.preferences.to_api_dict(),
            "isEmailVerified": self.is_email_verified,
            "lastLogin": isoformat(self.last_login),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
