"""Password hashing and session tokens."""
from __future__ import annotations

from datetime import timedelta
import logging
from typing import Any, Dict

import bcrypt
import jwt

from .dates import utcnow
from .errors import AuthenticationError

logger = logging.getLogger(__name__)

AUTH_COOKIE = "auth-token"
BCRYPT_ROUNDS = 12
JWT_ALGORITHM = "HS256"


def hash_password(secret: str) -> str:
    return bcrypt.hashpw(secret.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(secret: str, hashed: str) -> bool:
    if not secret or not hashed:
        return False
    try:
        return bcrypt.checkpw(secret.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def issue_token(user_id: str, email: str, name: str, secret: str, ttl: timedelta) -> str:
    """Sign a session token carrying the user's identity."""
    now = utcnow()
    payload = {
        "userId": user_id,
        "email": email,
        "name": name,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    """Verify and decode a session token.

    Raises:
        AuthenticationError: for expired, malformed or wrongly signed tokens
            alike.
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError as exc:
        logger.info(f"Rejected session token: {exc}")
        raise AuthenticationError("Unauthorized") from exc
    if not claims.get("userId"):
        raise AuthenticationError("Unauthorized")
    return claims
