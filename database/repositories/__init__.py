"""
Repository layer for database access.

Provides async CRUD operations for all models. Category, tag and prompt
repositories are bound to a single owner.
"""

from .base import OwnedRepository
from .category_repo import CategoryRepository
from .prompt_repo import PromptRepository
from .tag_repo import TagRepository
from .user_repo import UserRepository

__all__ = [
    "OwnedRepository",
    "UserRepository",
    "CategoryRepository",
    "TagRepository",
    "PromptRepository",
]
