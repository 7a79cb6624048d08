"""
Categories router.

Endpoints:
- GET /api/categories - List categories
- POST /api/categories - Create category
- POST /api/categories/reorder - Set sort orders in bulk
- GET /api/categories/{id} - Get category with recent prompts
- PUT /api/categories/{id} - Update category
- DELETE /api/categories/{id} - Delete category
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_category_service, parse_id
from api.schemas.categories import (
    CategoryChild,
    CategoryDetail,
    CategoryInfo,
    CategoryParent,
    CategoryPrompt,
    CreateCategoryRequest,
    ReorderCategoriesRequest,
    ReorderResult,
    UpdateCategoryRequest,
)
from api.schemas.common import APIResponse
from services import CategoryService
from services.category_service import CategoryView

router = APIRouter(prefix="/categories", tags=["categories"])


# ============ Helpers ============


def view_to_info(view: CategoryView) -> CategoryInfo:
    """Convert a category view to the response model."""
    category = view.category
    parent = category.parent
    return CategoryInfo(
        id=category.id,
        name=category.name,
        description=category.description,
        color=category.color,
        parent_id=category.parent_id,
        sort_order=category.sort_order,
        created_at=category.created_at,
        updated_at=category.updated_at,
        parent=CategoryParent(id=parent.id, name=parent.name, color=parent.color) if parent else None,
        children=[
            CategoryChild(
                id=child.id,
                name=child.name,
                color=child.color,
                description=child.description,
            )
            for child in category.children
        ],
        prompt_count=view.prompt_count,
    )


def view_to_detail(view: CategoryView) -> CategoryDetail:
    """Convert a category view to the detail model."""
    return CategoryDetail(
        **view_to_info(view).model_dump(),
        prompts=[
            CategoryPrompt(id=p.id, title=p.title, created_at=p.created_at)
            for p in view.prompts
        ],
    )


# ============ Endpoints ============


@router.get("", response_model=APIResponse[list[CategoryInfo]])
async def list_categories(
    service: CategoryService = Depends(get_category_service),
):
    """List all of the caller's categories."""
    views = await service.list_categories()
    return APIResponse.ok([view_to_info(v) for v in views])


@router.post(
    "",
    response_model=APIResponse[CategoryInfo],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: CreateCategoryRequest,
    service: CategoryService = Depends(get_category_service),
):
    """Create a category."""
    view = await service.create_category(
        name=body.name,
        description=body.description,
        color=body.color,
        parent_id=body.parent_id,
        sort_order=body.sort_order,
    )
    return APIResponse.ok(view_to_info(view), message="Category created")


@router.post("/reorder", response_model=APIResponse[ReorderResult])
async def reorder_categories(
    body: ReorderCategoriesRequest,
    service: CategoryService = Depends(get_category_service),
):
    """Apply new sort orders; ids the caller does not own are skipped."""
    updated, skipped = await service.reorder(
        [(item.id, item.sort_order) for item in body.categories]
    )
    return APIResponse.ok(
        ReorderResult(updated=updated, skipped=skipped),
        message="Categories reordered",
    )


@router.get("/{category_id}", response_model=APIResponse[CategoryDetail])
async def get_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
):
    """Get one category with its most recent prompts."""
    view = await service.get_category(parse_id(category_id))
    return APIResponse.ok(view_to_detail(view))


@router.put("/{category_id}", response_model=APIResponse[CategoryInfo])
async def update_category(
    category_id: str,
    body: UpdateCategoryRequest,
    service: CategoryService = Depends(get_category_service),
):
    """Update a category; only the fields sent are changed."""
    changes = {key: getattr(body, key) for key in body.model_fields_set}
    view = await service.update_category(parse_id(category_id), changes)
    return APIResponse.ok(view_to_info(view), message="Category updated")


@router.delete("/{category_id}", response_model=APIResponse[None])
async def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
):
    """Delete a category without children; its prompts become uncategorized."""
    moved = await service.delete_category(parse_id(category_id))
    message = "Category deleted"
    if moved:
        message = f"Category deleted; {moved} prompt(s) moved to uncategorized"
    return APIResponse(success=True, message=message)
