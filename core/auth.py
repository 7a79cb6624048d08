"""
Central authentication logic for bearer tokens.

Resolves a signed token to the current, non-deleted user. The FastAPI
dependency wrappers live in api.dependencies; this module only needs a
user repository to look the account up.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import AuthenticationError, NoTokenError, UserNotFoundError
from .security import extract_token_from_header, verify_token

if TYPE_CHECKING:
    from database.repositories import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class AppUser:
    """Public fields of the authenticated caller, attached to each request."""

    id: int
    username: str
    email: str
    avatar_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase shape used in responses."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "avatarUrl": self.avatar_url,
        }


def to_app_user(user: Any) -> AppUser:
    """Convert a User row to AppUser."""
    return AppUser(
        id=user.id,
        username=user.username,
        email=user.email,
        avatar_url=user.avatar_url,
    )


async def resolve_token(token: str, user_repo: "UserRepository") -> AppUser:
    """
    Resolve a raw token to an active user.

    Raises:
        InvalidTokenError: bad signature or expired token
        UserNotFoundError: token is valid but the user is gone or soft-deleted
    """
    payload = verify_token(token)
    user = await user_repo.get_active_by_id(payload["userId"])
    if user is None:
        raise UserNotFoundError()
    return to_app_user(user)


async def authenticate_token(
    authorization: str | None,
    user_repo: "UserRepository",
) -> AppUser:
    """
    Require a valid bearer token.

    Raises NoTokenError when the header is absent or not a bearer credential.
    """
    token = extract_token_from_header(authorization)
    if not token:
        raise NoTokenError()
    return await resolve_token(token, user_repo)


async def optional_auth(
    authorization: str | None,
    user_repo: "UserRepository",
) -> AppUser | None:
    """
    Resolve the caller if a usable token is present.

    Never rejects: missing, invalid or orphaned tokens all yield None.
    """
    token = extract_token_from_header(authorization)
    if not token:
        return None

    try:
        return await resolve_token(token, user_repo)
    except AuthenticationError as e:
        logger.info("Optional auth token rejected: %s", e.error_code)
        return None
