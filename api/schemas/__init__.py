"""
Pydantic schemas for API request/response models.
"""

from .common import (
    APIResponse,
    CamelModel,
    ErrorDetail,
    Pagination,
    HealthStatus,
    HealthCheckResponse,
    DetailedHealthCheckResponse,
    ComponentHealth,
)

from .auth import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdateRequest,
    UserInfo,
    ProfileInfo,
    AuthResult,
)

from .categories import (
    CreateCategoryRequest,
    UpdateCategoryRequest,
    ReorderCategoriesRequest,
    CategoryInfo,
    CategoryDetail,
    ReorderResult,
)

from .tags import (
    CreateTagRequest,
    UpdateTagRequest,
    BatchCreateTagsRequest,
    TagInfo,
    TagDetail,
    BatchCreateResult,
)

from .prompts import (
    VariableType,
    PromptVariable,
    CreatePromptRequest,
    UpdatePromptRequest,
    PromptInfo,
    PromptDetail,
    VersionSummary,
)

__all__ = [
    # Common
    "APIResponse",
    "CamelModel",
    "ErrorDetail",
    "Pagination",
    "HealthStatus",
    "HealthCheckResponse",
    "DetailedHealthCheckResponse",
    "ComponentHealth",
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdateRequest",
    "UserInfo",
    "ProfileInfo",
    "AuthResult",
    # Categories
    "CreateCategoryRequest",
    "UpdateCategoryRequest",
    "ReorderCategoriesRequest",
    "CategoryInfo",
    "CategoryDetail",
    "ReorderResult",
    # Tags
    "CreateTagRequest",
    "UpdateTagRequest",
    "BatchCreateTagsRequest",
    "TagInfo",
    "TagDetail",
    "BatchCreateResult",
    # Prompts
    "VariableType",
    "PromptVariable",
    "CreatePromptRequest",
    "UpdatePromptRequest",
    "PromptInfo",
    "PromptDetail",
    "VersionSummary",
]
