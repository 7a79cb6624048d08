"""
Authentication router.

Endpoints:
- POST /api/auth/register - Create an account and get a token
- POST /api/auth/login - Exchange email and password for a token
- GET /api/auth/profile - Current user's profile
- PUT /api/auth/profile - Update username, avatar or settings
- GET /api/auth/verify - Check a token and return its user
- POST /api/auth/logout - Acknowledge logout (tokens are stateless)
"""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_auth_service, get_current_user
from api.schemas.auth import (
    AuthResult,
    LoginRequest,
    ProfileInfo,
    ProfileUpdateRequest,
    RegisterRequest,
    UserInfo,
)
from api.schemas.common import APIResponse
from core.auth import AppUser
from database.models import User
from services import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ============ Helpers ============


def user_to_info(user: User | AppUser) -> UserInfo:
    """Convert a user row or request user to public fields."""
    return UserInfo(
        id=user.id,
        username=user.username,
        email=user.email,
        avatar_url=user.avatar_url,
    )


def user_to_profile(user: User) -> ProfileInfo:
    """Convert a user row to profile fields."""
    return ProfileInfo(
        id=user.id,
        username=user.username,
        email=user.email,
        avatar_url=user.avatar_url,
        settings=user.settings or {},
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


# ============ Endpoints ============


@router.post(
    "/register",
    response_model=APIResponse[AuthResult],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Register a new account."""
    result = await service.register(body.username, body.email, body.password)
    return APIResponse.ok(
        AuthResult(user=user_to_info(result.user), token=result.token),
        message="Registration successful",
    )


@router.post("/login", response_model=APIResponse[AuthResult])
async def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Log in with email and password."""
    result = await service.login(body.email, body.password)
    return APIResponse.ok(
        AuthResult(user=user_to_info(result.user), token=result.token),
        message="Login successful",
    )


@router.get("/profile", response_model=APIResponse[ProfileInfo])
async def get_profile(
    user: AppUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Get the current user's profile."""
    db_user = await service.get_profile(user.id)
    return APIResponse.ok(user_to_profile(db_user))


@router.put("/profile", response_model=APIResponse[ProfileInfo])
async def update_profile(
    body: ProfileUpdateRequest,
    user: AppUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Update the current user's profile. Omitted fields are left unchanged."""
    changes = {key: getattr(body, key) for key in body.model_fields_set}
    db_user = await service.update_profile(user.id, changes)
    return APIResponse.ok(user_to_profile(db_user), message="Profile updated")


@router.get("/verify", response_model=APIResponse[UserInfo])
async def verify(user: AppUser = Depends(get_current_user)):
    """Return the user a valid token belongs to."""
    return APIResponse.ok(user_to_info(user))


@router.post("/logout", response_model=APIResponse[None])
async def logout(user: AppUser = Depends(get_current_user)):
    """
    Log out.

    Tokens are not tracked server-side; the client discards its copy.
    """
    logger.info(f"User logged out: id={user.id}")
    return APIResponse(success=True, message="Logged out")
