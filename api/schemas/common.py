"""
Common Pydantic schemas used across the API.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, StringConstraints
from pydantic.alias_generators import to_camel


T = TypeVar("T")

# Surrounding whitespace is dropped before storage
Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]


class CamelModel(BaseModel):
    """
    Base for API schemas.

    Python attributes stay snake_case; JSON is camelCase both ways. Snake
    case names are accepted on input too.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "protected_namespaces": (),
    }


class ErrorDetail(BaseModel):
    """Error detail for API responses."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional error details"
    )


class APIResponse(BaseModel, Generic[T]):
    """
    Standard API response wrapper.

    All API endpoints return responses in this format.
    """

    success: bool = Field(..., description="Whether the request was successful")
    data: Optional[T] = Field(default=None, description="Response data")
    error: Optional[ErrorDetail] = Field(default=None, description="Error details if failed")
    message: Optional[str] = Field(default=None, description="Human-readable outcome")
    meta: Optional[Dict[str, Any]] = Field(default=None, description="Pagination and other metadata")

    @classmethod
    def ok(
        cls,
        data: T,
        message: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> "APIResponse[T]":
        """Create a successful response."""
        return cls(success=True, data=data, message=message, meta=meta)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> "APIResponse[None]":
        """Create a failed response."""
        return cls(
            success=False,
            error=ErrorDetail(code=code, message=message, details=details)
        )


class Pagination(CamelModel):
    """Offset pagination info returned under meta.pagination."""

    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "Pagination":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=(total + page_size - 1) // page_size,
        )


class HealthStatus(str, Enum):
    """Health check status enum."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    status: HealthStatus
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class HealthCheckResponse(BaseModel):
    """Basic health check response."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=lambda: datetime.now())


class DetailedHealthCheckResponse(BaseModel):
    """Detailed health check response with component status."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=lambda: datetime.now())
    version: str
    environment: str
    uptime_seconds: float
    components: Dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Health status of each component"
    )
