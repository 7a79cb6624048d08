"""
API routers for different endpoints.
"""

from .health import router as health_router
from .auth import router as auth_router
from .categories import router as categories_router
from .tags import router as tags_router
from .prompts import router as prompts_router

__all__ = [
    "health_router",
    "auth_router",
    "categories_router",
    "tags_router",
    "prompts_router",
]
