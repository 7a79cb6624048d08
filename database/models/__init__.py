"""
SQLAlchemy models for the Prompt Collection API.
"""

from .base import Base, SoftDeleteMixin, TimestampMixin
from .category import Category
from .prompt import Prompt, PromptTag, PromptVersion
from .tag import Tag
from .user import User

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    # Models
    "User",
    "Category",
    "Tag",
    "Prompt",
    "PromptTag",
    "PromptVersion",
]
