"""
Account service: registration, login and profile management.

Passwords are hashed with bcrypt in a worker thread; tokens are HS256 JWTs
carrying the user id.
"""

import logging
from dataclasses import dataclass
from typing import Any

from core.exceptions import (
    InvalidCredentialsError,
    MissingFieldsError,
    UserExistsError,
    UserNotFoundError,
    UsernameTakenError,
    ValidationError,
    WeakPasswordError,
)
from core.security import create_access_token, hash_password, verify_password
from database.models import User
from database.repositories import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


@dataclass
class AuthResult:
    """A user together with a freshly issued token."""

    user: User
    token: str


def check_password_policy(password: str) -> None:
    """
    Enforce the password length policy.

    Raises:
        WeakPasswordError: shorter than 6 characters
        ValidationError: longer than bcrypt can hash
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")


class AuthService:
    """Service for account registration, login and profile updates."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        """
        Register a new account and issue a token.

        Raises:
            MissingFieldsError: any field blank
            WeakPasswordError: password too short
            UserExistsError: username or email already registered
        """
        if not username or not email or not password:
            raise MissingFieldsError("Username, email and password are required")

        check_password_policy(password)

        email = email.lower()
        if await self.user_repo.get_by_username(username):
            raise UserExistsError("Username is already registered")
        if await self.user_repo.get_by_email(email):
            raise UserExistsError("Email is already registered")

        password_hash = await hash_password(password)
        user = await self.user_repo.create(
            username=username,
            email=email,
            password_hash=password_hash,
        )

        logger.info(f"User registered: id={user.id} username={user.username}")
        return AuthResult(user=user, token=create_access_token(user.id))

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Log in with email and password.

        Unknown email, deleted account and wrong password all produce the
        same InvalidCredentialsError.
        """
        if not email or not password:
            raise MissingFieldsError("Email and password are required")

        user = await self.user_repo.get_by_email(email.lower())
        if user is None or user.is_deleted:
            raise InvalidCredentialsError()

        if not await verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        logger.info(f"User logged in: id={user.id}")
        return AuthResult(user=user, token=create_access_token(user.id))

    async def get_profile(self, user_id: int) -> User:
        """Load the caller's account row."""
        user = await self.user_repo.get_active_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def update_profile(self, user_id: int, changes: dict[str, Any]) -> User:
        """
        Apply a partial profile update.

        Args:
            user_id: The caller
            changes: Subset of username, avatar_url, settings

        Raises:
            MissingFieldsError: username sent blank
            UsernameTakenError: username used by another account
        """
        user = await self.get_profile(user_id)

        if "username" in changes:
            username = changes["username"]
            if not username:
                raise MissingFieldsError("Username cannot be empty")
            if username != user.username:
                existing = await self.user_repo.get_by_username(username)
                if existing is not None and existing.id != user.id:
                    raise UsernameTakenError()

        if "settings" in changes and changes["settings"] is None:
            changes["settings"] = {}

        return await self.user_repo.update(user, **changes)
