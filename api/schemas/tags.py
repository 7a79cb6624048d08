"""
Pydantic schemas for the tags API.
"""

from datetime import datetime

from pydantic import Field

from .common import CamelModel, Trimmed


class CreateTagRequest(CamelModel):
    """Request to create a tag."""

    name: Trimmed = Field(..., max_length=50)
    color: Trimmed | None = Field(default=None, max_length=20)


class UpdateTagRequest(CamelModel):
    """Partial tag update."""

    name: Trimmed | None = Field(default=None, max_length=50)
    color: Trimmed | None = Field(default=None, max_length=20)


class BatchTagItem(CamelModel):
    """One tag in a batch create."""

    name: Trimmed = Field(..., max_length=50)
    color: Trimmed | None = Field(default=None, max_length=20)


class BatchCreateTagsRequest(CamelModel):
    """Batch create request."""

    tags: list[BatchTagItem]


class TagInfo(CamelModel):
    """Tag with the number of live prompts carrying it."""

    id: int
    name: str
    color: str
    created_at: datetime
    prompt_count: int = 0


class TagPrompt(CamelModel):
    """Prompt summary shown on a tag detail."""

    id: int
    title: str
    description: str | None = None
    created_at: datetime
    usage_count: int
    is_favorite: bool


class TagDetail(TagInfo):
    """Tag with its most recent prompts."""

    prompts: list[TagPrompt] = Field(default_factory=list)


class BatchCreateResult(CamelModel):
    """Outcome of a batch create."""

    created: int
    existing: int
    existing_names: list[str] = Field(default_factory=list)
    tags: list[TagInfo] = Field(default_factory=list)
