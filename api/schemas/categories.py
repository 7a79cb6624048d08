"""
Pydantic schemas for the categories API.
"""

from datetime import datetime

from pydantic import Field

from .common import CamelModel, Trimmed


class CreateCategoryRequest(CamelModel):
    """Request to create a category."""

    name: Trimmed = Field(..., max_length=100)
    description: Trimmed | None = None
    color: Trimmed | None = Field(default=None, max_length=20)
    parent_id: int | None = None
    sort_order: int | None = None


class UpdateCategoryRequest(CamelModel):
    """
    Partial category update.

    Only fields present in the body are applied; an explicit null parentId
    moves the category to the root.
    """

    name: Trimmed | None = Field(default=None, max_length=100)
    description: Trimmed | None = None
    color: Trimmed | None = Field(default=None, max_length=20)
    parent_id: int | None = None
    sort_order: int | None = None


class ReorderItem(CamelModel):
    """New sort order for one category."""

    id: int
    sort_order: int


class ReorderCategoriesRequest(CamelModel):
    """Batch of sort order updates."""

    categories: list[ReorderItem]


class CategoryParent(CamelModel):
    """Parent summary."""

    id: int
    name: str
    color: str


class CategoryChild(CamelModel):
    """Child summary."""

    id: int
    name: str
    color: str
    description: str | None = None


class CategoryPrompt(CamelModel):
    """Prompt summary shown on a category detail."""

    id: int
    title: str
    created_at: datetime


class CategoryInfo(CamelModel):
    """Category with its immediate relatives and prompt count."""

    id: int
    name: str
    description: str | None = None
    color: str
    parent_id: int | None = None
    sort_order: int
    created_at: datetime
    updated_at: datetime
    parent: CategoryParent | None = None
    children: list[CategoryChild] = Field(default_factory=list)
    prompt_count: int = 0


class CategoryDetail(CategoryInfo):
    """Category with its most recent prompts."""

    prompts: list[CategoryPrompt] = Field(default_factory=list)


class ReorderResult(CamelModel):
    """Outcome of a reorder batch."""

    updated: int
    skipped: int
