"""
Security utilities for JWT token handling and password hashing.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import bcrypt
from jose import jwt, JWTError
from starlette.concurrency import run_in_threadpool

from .config import get_settings
from .exceptions import InvalidTokenError


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token for a user.

    Args:
        user_id: Id of the user the token identifies
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string with userId, iat and exp claims
    """
    settings = get_settings()

    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(days=settings.jwt_expire_days)

    to_encode = {
        "userId": user_id,
        "iat": now,
        "exp": expire,
    }

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload

    Raises:
        InvalidTokenError: If token is invalid, expired or carries no user id
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise InvalidTokenError(details={"error": str(e)})

    if not isinstance(payload.get("userId"), int):
        raise InvalidTokenError(details={"error": "userId claim missing"})
    return payload


def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """
    Extract JWT token from Authorization header.

    Supports "Bearer <token>" format.

    Args:
        authorization: Authorization header value

    Returns:
        Token string or None if not present/invalid format
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


# ============ Passwords ============


def _hash_password_sync(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _check_password_sync(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


async def hash_password(password: str) -> str:
    """Hash a password with bcrypt off the event loop."""
    settings = get_settings()
    return await run_in_threadpool(_hash_password_sync, password, settings.bcrypt_rounds)


async def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash off the event loop."""
    return await run_in_threadpool(_check_password_sync, password, password_hash)
