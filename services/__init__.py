"""
Services module for the Prompt Collection API.
"""
from .auth_service import AuthService
from .category_service import CategoryService
from .prompt_service import PromptService
from .tag_service import TagService

__all__ = ["AuthService", "CategoryService", "TagService", "PromptService"]
