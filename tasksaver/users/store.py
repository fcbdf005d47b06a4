"""User accounts: registration, login and profile edits."""
from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Dict, Optional

from ..auth import hash_password, verify_password
from ..dates import utcnow
from ..errors import AuthenticationError, ValidationError
from ..store import DocumentStore, where
from .types import User, UserPreferences

logger = logging.getLogger(__name__)

COLLECTION = "users"
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72
NAME_LENGTH = (2, 50)
MAX_BIO_LENGTH = 500
THEMES = ("light", "dark")
EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_name(name: str) -> str:
    name = name.strip()
    if len(name) < NAME_LENGTH[0]:
        raise ValidationError("Name must be at least 2 characters")
    if len(name) > NAME_LENGTH[1]:
        raise ValidationError("Name cannot exceed 50 characters")
    return name


def validate_email(email: str) -> str:
    email = normalize_email(email)
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email")
    return email


def get_user(store: DocumentStore, user_id: str) -> Optional[User]:
    data = store.get(COLLECTION, user_id)
    return User.from_dict(data) if data else None


def get_user_by_email(store: DocumentStore, email: str) -> Optional[User]:
    matches = store.find(COLLECTION, [where("email", normalize_email(email))], limit=1)
    return User.from_dict(matches[0]) if matches else None


def create_user(
    store: DocumentStore,
    name: str,
    email: str,
    password: str,
    *,
    timezone: str = "UTC",
) -> User:
    """Register a new account.

    Raises:
        ValidationError: for a missing field, a bad name or email, a short
            or over-long password, or an email that is already registered.
    """
    if not name or not email or not password:
        raise ValidationError("All fields are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError("Password cannot exceed 72 bytes")

    name = validate_name(name)
    email = validate_email(email)
    if get_user_by_email(store, email) is not None:
        raise ValidationError("User with this email already exists")

    now = utcnow()
    user = User(
        id=str(uuid.uuid4()),
        name=name,
        email=email,
        password_hash=hash_password(password),
        created_at=now,
        updated_at=now,
        preferences=UserPreferences(timezone=timezone),
        last_login=now,
    )
    store.insert(COLLECTION, user.to_dict())
    logger.info(f"Registered user {user.id}")
    return user


def authenticate(store: DocumentStore, email: str, password: str) -> User:
    """Check credentials and touch ``last_login``.

    Raises:
        AuthenticationError: for an unknown email or a wrong password; the
            two cases share one message.
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = get_user_by_email(store, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rejected: invalid email or password")
        raise AuthenticationError("Invalid email or password")

    user.last_login = utcnow()
    user.updated_at = user.last_login
    store.replace(COLLECTION, user.id, user.to_dict())
    return user


def update_profile(
    store: DocumentStore,
    user: User,
    *,
    name: Optional[str] = None,
    bio: Optional[str] = None,
    avatar: Optional[str] = None,
    preferences: Optional[Dict[str, Any]] = None,
    current_password: Optional[str] = None,
    new_password: Optional[str] = None,
) -> User:
    """Apply profile edits; a password change needs both passwords.

    Raises:
        ValidationError: wrong current password, or a new password that is
            too short or too long.
    """
    if name:
        user.name = validate_name(name)
    if bio is not None:
        bio = bio.strip()
        if len(bio) > MAX_BIO_LENGTH:
            raise ValidationError("Bio cannot exceed 500 characters")
        user.bio = bio
    if avatar is not None:
        user.avatar = avatar
    if preferences:
        merged = user.preferences.to_dict()
        merged.update(preferences)
        if merged.get("theme") not in THEMES:
            raise ValidationError("Theme must be light or dark")
        user.preferences = UserPreferences.from_dict(merged)

    if current_password and new_password:
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("New password must be at least 6 characters")
        if len(new_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError("New password cannot exceed 72 bytes")
        user.password_hash = hash_password(new_password)
        logger.info(f"Password changed for user {user.id}")

    user.updated_at = utcnow()
    store.replace(COLLECTION, user.id, user.to_dict())
    return user
