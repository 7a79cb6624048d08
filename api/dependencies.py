"""
FastAPI dependency injection for database sessions, repositories and services.

One session per request: it is committed when the handler returns and
rolled back if anything raises, so multi-step writes are atomic.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AppUser, authenticate_token, optional_auth
from core.exceptions import InvalidIdError
from database import Database
from database.repositories import (
    CategoryRepository,
    PromptRepository,
    TagRepository,
    UserRepository,
)
from services import AuthService, CategoryService, PromptService, TagService

logger = logging.getLogger(__name__)


def parse_id(value: str) -> int:
    """Parse a path id; anything but a positive integer is INVALID_ID."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidIdError(details={"id": value})
    if parsed < 1:
        raise InvalidIdError(details={"id": value})
    return parsed


# ============ Database ============


def get_database(request: Request) -> Database:
    """The Database handle created at startup."""
    return request.app.state.db


async def get_db_session(
    db: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session dependency.

    Commits on success, rolls back and re-raises on error.
    """
    async with db.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
) -> UserRepository:
    """Get UserRepository dependency."""
    return UserRepository(session)


# ============ Authentication ============


async def get_current_user(
    authorization: str | None = Header(default=None),
    user_repo: UserRepository = Depends(get_user_repository),
) -> AppUser:
    """
    Require an authenticated caller.

    Raises NO_TOKEN, INVALID_TOKEN or USER_NOT_FOUND (all 401).
    """
    return await authenticate_token(authorization, user_repo)


async def get_optional_user(
    authorization: str | None = Header(default=None),
    user_repo: UserRepository = Depends(get_user_repository),
) -> AppUser | None:
    """Resolve the caller if a valid token is present, otherwise None."""
    return await optional_auth(authorization, user_repo)


# ============ Owner-scoped repositories ============


async def get_category_repository(
    user: AppUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> CategoryRepository:
    """Get CategoryRepository bound to the caller."""
    return CategoryRepository(session, user.id)


async def get_tag_repository(
    user: AppUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> TagRepository:
    """Get TagRepository bound to the caller."""
    return TagRepository(session, user.id)


async def get_prompt_repository(
    user: AppUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> PromptRepository:
    """Get PromptRepository bound to the caller."""
    return PromptRepository(session, user.id)


# ============ Services ============


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
) -> AuthService:
    return AuthService(user_repo)


async def get_category_service(
    repo: CategoryRepository = Depends(get_category_repository),
) -> CategoryService:
    return CategoryService(repo)


async def get_tag_service(
    repo: TagRepository = Depends(get_tag_repository),
) -> TagService:
    return TagService(repo)


async def get_prompt_service(
    repo: PromptRepository = Depends(get_prompt_repository),
    category_repo: CategoryRepository = Depends(get_category_repository),
    tag_repo: TagRepository = Depends(get_tag_repository),
) -> PromptService:
    return PromptService(repo, category_repo, tag_repo)
