"""
Custom exception classes for the application.

All exceptions inherit from AppException and include:
- error_code: Machine-readable error code returned in the response envelope
- message: Human-readable error message
- status_code: HTTP status code to return
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# ============ Validation (400) ============


class ValidationError(AppException):
    """Raised when input validation fails."""

    error_code = "INVALID_DATA"
    message = "Invalid input"
    status_code = 400


class MissingFieldsError(ValidationError):
    """Raised when required fields are absent or blank."""

    error_code = "MISSING_FIELDS"
    message = "Required fields are missing"


class WeakPasswordError(ValidationError):
    """Raised when a password does not meet the length policy."""

    error_code = "WEAK_PASSWORD"
    message = "Password must be at least 6 characters long"


class InvalidIdError(ValidationError):
    """Raised when a path id is not a positive integer."""

    error_code = "INVALID_ID"
    message = "Invalid id"


# ============ Authentication (401) ============


class AuthenticationError(AppException):
    """Raised when authentication fails."""

    error_code = "AUTHENTICATION_FAILED"
    message = "Authentication failed"
    status_code = 401


class NoTokenError(AuthenticationError):
    """Raised when no bearer token is supplied."""

    error_code = "NO_TOKEN"
    message = "Access token is missing"


class InvalidTokenError(AuthenticationError):
    """Raised when a token fails signature or expiry checks."""

    error_code = "INVALID_TOKEN"
    message = "Access token is invalid or expired"


class UserNotFoundError(AuthenticationError):
    """Raised when a token references a missing or deleted user."""

    error_code = "USER_NOT_FOUND"
    message = "User does not exist or has been deleted"


class InvalidCredentialsError(AuthenticationError):
    """Raised on failed login; never says which half was wrong."""

    error_code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


# ============ Not found (404) ============


class NotFoundError(AppException):
    """Raised when a resource is not found."""

    error_code = "NOT_FOUND"
    message = "Resource not found"
    status_code = 404


class CategoryNotFoundError(NotFoundError):
    """Raised when a category is not found for the caller."""

    error_code = "CATEGORY_NOT_FOUND"
    message = "Category not found"


class TagNotFoundError(NotFoundError):
    """Raised when a tag is not found for the caller."""

    error_code = "TAG_NOT_FOUND"
    message = "Tag not found"


class PromptNotFoundError(NotFoundError):
    """Raised when a prompt is not found for the caller."""

    error_code = "PROMPT_NOT_FOUND"
    message = "Prompt not found"


# ============ Conflicts (409) ============


class ConflictError(AppException):
    """Raised when a uniqueness rule is violated."""

    error_code = "CONFLICT"
    message = "Resource already exists"
    status_code = 409


class UserExistsError(ConflictError):
    """Raised when registering with a taken username or email."""

    error_code = "USER_EXISTS"
    message = "User already exists"


class UsernameTakenError(ConflictError):
    """Raised when renaming a profile to a taken username."""

    error_code = "USERNAME_TAKEN"
    message = "Username is already taken"


class NameExistsError(ConflictError):
    """Raised when a category or tag name collides."""

    error_code = "NAME_EXISTS"
    message = "Name already exists"


# ============ Business rules (400) ============


class BusinessRuleError(AppException):
    """Raised when an operation would break a data-model rule."""

    error_code = "INVALID_OPERATION"
    message = "Operation not allowed"
    status_code = 400


class ParentNotFoundError(BusinessRuleError):
    """Raised when a parent category does not exist for the caller."""

    error_code = "PARENT_NOT_FOUND"
    message = "Parent category not found"


class CircularReferenceError(BusinessRuleError):
    """Raised when re-parenting would create a cycle."""

    error_code = "CIRCULAR_REFERENCE"
    message = "A category cannot be moved under itself or its descendants"


class HasChildrenError(BusinessRuleError):
    """Raised when deleting a category that still has children."""

    error_code = "HAS_CHILDREN"
    message = "Category has child categories; delete them first"


class DuplicateNamesError(BusinessRuleError):
    """Raised when a batch contains the same name twice."""

    error_code = "DUPLICATE_NAMES"
    message = "Tag names in the batch must be unique"


class AllExistsError(BusinessRuleError):
    """Raised when every name in a batch already exists."""

    error_code = "ALL_EXISTS"
    message = "All tags already exist"
