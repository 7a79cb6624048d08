"""
User repository for user CRUD operations.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User
from database.models.base import utcnow


class UserRepository:
    """Repository for User model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by ID, including soft-deleted users."""
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_active_by_id(self, user_id: int) -> User | None:
        """Get user by ID if not soft-deleted."""
        result = await self.session.execute(
            select(User).where(User.id == user_id, User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        """Get user by username."""
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        avatar_url: str | None = None,
    ) -> User:
        """Create a new user. The email is stored lower-cased."""
        user = User(
            username=username,
            email=email.lower(),
            password_hash=password_hash,
            avatar_url=avatar_url,
            settings={},
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def update(self, user: User, **kwargs: Any) -> User:
        """Update a user with arbitrary fields (partial update)."""
        for key, value in kwargs.items():
            if hasattr(user, key):
                setattr(user, key, value)
        await self.session.flush()
        return user

    async def soft_delete(self, user: User) -> User:
        """Mark a user deleted; they can no longer log in or authenticate."""
        user.deleted_at = utcnow()
        await self.session.flush()
        return user
