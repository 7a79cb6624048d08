"""
Tags router.

Endpoints:
- GET /api/tags - List tags (optional ?search=)
- POST /api/tags - Create tag
- GET /api/tags/stats - Tags with prompt counts
- POST /api/tags/batch - Create several tags
- GET /api/tags/{id} - Get tag with recent prompts
- PUT /api/tags/{id} - Update tag
- DELETE /api/tags/{id} - Delete tag
"""

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_tag_service, parse_id
from api.schemas.common import APIResponse
from api.schemas.tags import (
    BatchCreateResult,
    BatchCreateTagsRequest,
    CreateTagRequest,
    TagDetail,
    TagInfo,
    TagPrompt,
    UpdateTagRequest,
)
from database.models import Tag
from services import TagService
from services.tag_service import TagView

router = APIRouter(prefix="/tags", tags=["tags"])


# ============ Helpers ============


def tag_to_info(tag: Tag, prompt_count: int = 0) -> TagInfo:
    """Convert a tag row to the response model."""
    return TagInfo(
        id=tag.id,
        name=tag.name,
        color=tag.color,
        created_at=tag.created_at,
        prompt_count=prompt_count,
    )


def view_to_detail(view: TagView) -> TagDetail:
    """Convert a tag view to the detail model."""
    return TagDetail(
        **tag_to_info(view.tag, view.prompt_count).model_dump(),
        prompts=[
            TagPrompt(
                id=p.id,
                title=p.title,
                description=p.description,
                created_at=p.created_at,
                usage_count=p.usage_count,
                is_favorite=p.is_favorite,
            )
            for p in view.prompts
        ],
    )


# ============ Endpoints ============


@router.get("", response_model=APIResponse[list[TagInfo]])
async def list_tags(
    search: str | None = Query(default=None),
    service: TagService = Depends(get_tag_service),
):
    """List the caller's tags by name."""
    views = await service.list_tags(search=search)
    return APIResponse.ok([tag_to_info(v.tag, v.prompt_count) for v in views])


@router.post(
    "",
    response_model=APIResponse[TagInfo],
    status_code=status.HTTP_201_CREATED,
)
async def create_tag(
    body: CreateTagRequest,
    service: TagService = Depends(get_tag_service),
):
    """Create a tag."""
    view = await service.create_tag(name=body.name, color=body.color)
    return APIResponse.ok(tag_to_info(view.tag), message="Tag created")


@router.get("/stats", response_model=APIResponse[list[TagInfo]])
async def tag_stats(
    service: TagService = Depends(get_tag_service),
):
    """Tags with their prompt counts."""
    views = await service.get_stats()
    return APIResponse.ok([tag_to_info(v.tag, v.prompt_count) for v in views])


@router.post(
    "/batch",
    response_model=APIResponse[BatchCreateResult],
    status_code=status.HTTP_201_CREATED,
)
async def create_tags_batch(
    body: BatchCreateTagsRequest,
    service: TagService = Depends(get_tag_service),
):
    """Create several tags; names that already exist are skipped."""
    result = await service.create_batch(
        [{"name": item.name, "color": item.color} for item in body.tags]
    )
    return APIResponse.ok(
        BatchCreateResult(
            created=len(result.created),
            existing=len(result.existing_names),
            existing_names=result.existing_names,
            tags=[tag_to_info(tag) for tag in result.created],
        ),
        message=f"Created {len(result.created)} tag(s)",
    )


@router.get("/{tag_id}", response_model=APIResponse[TagDetail])
async def get_tag(
    tag_id: str,
    service: TagService = Depends(get_tag_service),
):
    """Get one tag with its most recent prompts."""
    view = await service.get_tag(parse_id(tag_id))
    return APIResponse.ok(view_to_detail(view))


@router.put("/{tag_id}", response_model=APIResponse[TagInfo])
async def update_tag(
    tag_id: str,
    body: UpdateTagRequest,
    service: TagService = Depends(get_tag_service),
):
    """Update a tag; only the fields sent are changed."""
    changes = {key: getattr(body, key) for key in body.model_fields_set}
    view = await service.update_tag(parse_id(tag_id), changes)
    return APIResponse.ok(tag_to_info(view.tag, view.prompt_count), message="Tag updated")


@router.delete("/{tag_id}", response_model=APIResponse[None])
async def delete_tag(
    tag_id: str,
    service: TagService = Depends(get_tag_service),
):
    """Delete a tag; prompts keep existing without it."""
    await service.delete_tag(parse_id(tag_id))
    return APIResponse(success=True, message="Tag deleted")
