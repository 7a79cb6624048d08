"""
Prompts router.

Endpoints:
- GET /api/prompts - List prompts (search, filters, sorting, pagination)
- POST /api/prompts - Create prompt
- GET /api/prompts/{id} - Get prompt with recent versions
- PUT /api/prompts/{id} - Update prompt
- DELETE /api/prompts/{id} - Soft-delete prompt
- POST /api/prompts/{id}/copy - Duplicate prompt
- POST /api/prompts/{id}/use - Count one use
"""

from typing import Any, Literal

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_prompt_service, parse_id
from api.schemas.common import APIResponse, Pagination
from api.schemas.prompts import (
    CreatePromptRequest,
    PromptCategory,
    PromptDetail,
    PromptInfo,
    PromptTagInfo,
    PromptVariable,
    UpdatePromptRequest,
    VersionSummary,
)
from database.models import Prompt
from services import PromptService
from services.prompt_service import PromptView

router = APIRouter(prefix="/prompts", tags=["prompts"])


# ============ Helpers ============


def prompt_to_info(prompt: Prompt) -> PromptInfo:
    """Convert a prompt with category and tags loaded to the response model."""
    category = prompt.category
    return PromptInfo(
        id=prompt.id,
        title=prompt.title,
        content=prompt.content,
        description=prompt.description,
        category_id=prompt.category_id,
        category=(
            PromptCategory(id=category.id, name=category.name, color=category.color)
            if category else None
        ),
        variables=prompt.variables or [],
        metadata=prompt.metadata_ or {},
        is_favorite=prompt.is_favorite,
        is_public=prompt.is_public,
        usage_count=prompt.usage_count,
        last_used_at=prompt.last_used_at,
        created_at=prompt.created_at,
        updated_at=prompt.updated_at,
        tags=[PromptTagInfo(id=t.id, name=t.name, color=t.color) for t in prompt.tags],
    )


def view_to_detail(view: PromptView) -> PromptDetail:
    """Convert a prompt view to the detail model."""
    return PromptDetail(
        **prompt_to_info(view.prompt).model_dump(),
        versions=[
            VersionSummary(
                id=v.id,
                version_number=v.version_number,
                title=v.title,
                change_log=v.change_log,
                created_at=v.created_at,
            )
            for v in view.versions
        ],
    )


def variables_to_json(variables: list[PromptVariable]) -> list[dict[str, Any]]:
    """Variable definitions as stored in the JSON column."""
    return [v.model_dump(mode="json") for v in variables]


def parse_category_filter(value: str | None) -> int | None:
    """categoryId query value; empty or "all" means no filter."""
    if value is None or value in ("", "all"):
        return None
    return parse_id(value)


def parse_tag_names(value: str | None) -> list[str]:
    """Comma-separated tag names."""
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


# ============ Endpoints ============


@router.get("", response_model=APIResponse[list[PromptInfo]])
async def list_prompts(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    search: str | None = Query(default=None),
    category_id: str | None = Query(default=None, alias="categoryId"),
    tags: str | None = Query(default=None, description="Comma-separated tag names"),
    is_favorite: bool | None = Query(default=None, alias="isFavorite"),
    sort_by: Literal["createdAt", "usageCount", "lastUsedAt", "title"] = Query(
        default="createdAt", alias="sortBy"
    ),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
    service: PromptService = Depends(get_prompt_service),
):
    """List the caller's prompts, one page at a time."""
    prompts, total = await service.list_prompts(
        page=page,
        page_size=page_size,
        search=search,
        category_id=parse_category_filter(category_id),
        is_favorite=is_favorite,
        tag_names=parse_tag_names(tags),
        sort_by=sort_by,
        sort_order=sort_order,
    )
    pagination = Pagination.build(page=page, page_size=page_size, total=total)
    return APIResponse.ok(
        [prompt_to_info(p) for p in prompts],
        meta={"pagination": pagination.model_dump(by_alias=True)},
    )


@router.post(
    "",
    response_model=APIResponse[PromptInfo],
    status_code=status.HTTP_201_CREATED,
)
async def create_prompt(
    body: CreatePromptRequest,
    service: PromptService = Depends(get_prompt_service),
):
    """Create a prompt; version 1 is recorded automatically."""
    data = {
        "title": body.title,
        "content": body.content,
        "description": body.description,
        "category_id": body.category_id,
        "variables": variables_to_json(body.variables),
        "metadata": body.metadata,
        "is_favorite": body.is_favorite,
        "is_public": body.is_public,
        "tags": body.tags,
    }
    view = await service.create_prompt(data)
    return APIResponse.ok(prompt_to_info(view.prompt), message="Prompt created")


@router.get("/{prompt_id}", response_model=APIResponse[PromptDetail])
async def get_prompt(
    prompt_id: str,
    service: PromptService = Depends(get_prompt_service),
):
    """Get a prompt with its category, tags and recent versions."""
    view = await service.get_prompt(parse_id(prompt_id))
    return APIResponse.ok(view_to_detail(view))


@router.put("/{prompt_id}", response_model=APIResponse[PromptInfo])
async def update_prompt(
    prompt_id: str,
    body: UpdatePromptRequest,
    service: PromptService = Depends(get_prompt_service),
):
    """Update a prompt; only the fields sent are changed."""
    changes = {key: getattr(body, key) for key in body.model_fields_set}
    if changes.get("variables") is not None:
        changes["variables"] = variables_to_json(changes["variables"])
    view = await service.update_prompt(parse_id(prompt_id), changes)
    return APIResponse.ok(prompt_to_info(view.prompt), message="Prompt updated")


@router.delete("/{prompt_id}", response_model=APIResponse[None])
async def delete_prompt(
    prompt_id: str,
    service: PromptService = Depends(get_prompt_service),
):
    """Soft-delete a prompt."""
    await service.delete_prompt(parse_id(prompt_id))
    return APIResponse(success=True, message="Prompt deleted")


@router.post(
    "/{prompt_id}/copy",
    response_model=APIResponse[PromptInfo],
    status_code=status.HTTP_201_CREATED,
)
async def copy_prompt(
    prompt_id: str,
    service: PromptService = Depends(get_prompt_service),
):
    """Duplicate a prompt and its tags, without its version history."""
    view = await service.copy_prompt(parse_id(prompt_id))
    return APIResponse.ok(prompt_to_info(view.prompt), message="Prompt copied")


@router.post("/{prompt_id}/use", response_model=APIResponse[PromptInfo])
async def use_prompt(
    prompt_id: str,
    service: PromptService = Depends(get_prompt_service),
):
    """Record one use of a prompt."""
    view = await service.use_prompt(parse_id(prompt_id))
    return APIResponse.ok(prompt_to_info(view.prompt), message="Usage recorded")
