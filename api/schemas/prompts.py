"""
Pydantic schemas for the prompts API.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import Field

from .common import CamelModel, Trimmed


class VariableType(StrEnum):
    """Prompt variable types."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"


class PromptVariable(CamelModel):
    """Definition of a prompt variable."""

    name: Trimmed = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Variable name (used in {{name}} placeholders)",
    )
    type: VariableType = Field(
        default=VariableType.STRING,
        description="Variable type",
    )
    default: Any = Field(
        default=None,
        description="Default value",
    )
    description: str | None = Field(
        default=None,
        max_length=200,
        description="Variable description for users",
    )
    required: bool = Field(
        default=False,
        description="Whether the variable must be filled in",
    )


class CreatePromptRequest(CamelModel):
    """Request to create a prompt."""

    title: Trimmed = Field(..., max_length=200)
    content: Trimmed
    description: Trimmed | None = None
    category_id: int | None = None
    variables: list[PromptVariable] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_favorite: bool = False
    is_public: bool = False
    tags: list[int] = Field(
        default_factory=list,
        description="IDs of tags owned by the caller",
    )


class UpdatePromptRequest(CamelModel):
    """
    Partial prompt update.

    Sending tags (even empty) replaces the whole tag set. Sending title or
    content records a new version.
    """

    title: Trimmed | None = Field(default=None, max_length=200)
    content: Trimmed | None = None
    description: Trimmed | None = None
    category_id: int | None = None
    variables: list[PromptVariable] | None = None
    metadata: dict[str, Any] | None = None
    is_favorite: bool | None = None
    is_public: bool | None = None
    tags: list[int] | None = None


class PromptCategory(CamelModel):
    """Category summary on a prompt."""

    id: int
    name: str
    color: str


class PromptTagInfo(CamelModel):
    """Tag summary on a prompt."""

    id: int
    name: str
    color: str


class VersionSummary(CamelModel):
    """Version metadata without the snapshot body."""

    id: int
    version_number: int
    title: str
    change_log: str | None = None
    created_at: datetime


class PromptInfo(CamelModel):
    """Prompt with its category and tags."""

    id: int
    title: str
    content: str
    description: str | None = None
    category_id: int | None = None
    category: PromptCategory | None = None
    variables: list[dict[str, Any]] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_favorite: bool
    is_public: bool
    usage_count: int
    last_used_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    tags: list[PromptTagInfo] = Field(default_factory=list)


class PromptDetail(PromptInfo):
    """Prompt with its most recent version summaries."""

    versions: list[VersionSummary] = Field(default_factory=list)
