"""
Password hashing (bcrypt) and access tokens (JWT, HS256).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from heartsmiles.core.config import settings
from heartsmiles.core.logging import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 12


class TokenExpired(Exception):
    """The access token was well-formed but is past its expiry."""


class TokenInvalid(Exception):
    """The access token could not be verified."""


def hash_password(password: str) -> str:
    """Hash a plain-text password."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plain-text password against a stored hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    staff_id: str,
    role: str,
    expires_minutes: int | None = None,
) -> str:
    """Issue a signed token carrying the staff id and role."""
    minutes = expires_minutes or settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
    payload: dict[str, Any] = {
        "userId": staff_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a token.

    Raises:
        TokenExpired: signature valid but token past expiry.
        TokenInvalid: anything else wrong with the token.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired(str(exc)) from exc
    except jwt.InvalidTokenError as exc:
        logger.warning("JWT verification failed", error=str(exc))
        raise TokenInvalid(str(exc)) from exc
