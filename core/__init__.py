"""
Core modules for the Prompt Collection API.

This package contains fundamental utilities used across the application:
- config: Application settings and configuration
- security: JWT token handling and password hashing
- auth: Bearer token resolution
- exceptions: Custom exception classes
"""

from .config import Settings, get_settings
from .exceptions import (
    AppException,
    AuthenticationError,
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Exceptions
    "AppException",
    "AuthenticationError",
    "BusinessRuleError",
    "ConflictError",
    "NotFoundError",
    "ValidationError",
]
