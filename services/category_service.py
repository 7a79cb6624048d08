"""
Category tree management.

Enforces sibling name uniqueness, keeps the parent chain acyclic and moves
prompts to uncategorized when their category is removed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import (
    CategoryNotFoundError,
    CircularReferenceError,
    HasChildrenError,
    MissingFieldsError,
    NameExistsError,
    ParentNotFoundError,
)
from database.models import Category, Prompt
from database.repositories import CategoryRepository

logger = logging.getLogger(__name__)

RECENT_PROMPTS_LIMIT = 10


@dataclass
class CategoryView:
    """A category plus the derived data shown alongside it."""

    category: Category
    prompt_count: int = 0
    prompts: list[Prompt] = field(default_factory=list)


class CategoryService:
    """Business rules for one user's categories."""

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    async def _get(self, category_id: int, with_relations: bool = False) -> Category:
        category = await self.repo.get_by_id(category_id, with_relations=with_relations)
        if category is None:
            raise CategoryNotFoundError()
        return category

    async def _view(self, category_id: int) -> CategoryView:
        category = await self._get(category_id, with_relations=True)
        counts = await self.repo.prompt_counts([category.id])
        return CategoryView(category=category, prompt_count=counts.get(category.id, 0))

    async def _assert_no_cycle(self, category_id: int, new_parent_id: int) -> None:
        """
        Walk up from the proposed parent; meeting category_id means a cycle.

        The visited set bounds the walk even if stored data already loops.
        """
        current: int | None = new_parent_id
        visited: set[int] = set()
        while current is not None and current not in visited:
            if current == category_id:
                raise CircularReferenceError()
            visited.add(current)
            ancestor = await self.repo.get_by_id(current)
            current = ancestor.parent_id if ancestor else None

    # ============ Reads ============

    async def list_categories(self) -> list[CategoryView]:
        """All categories with parent, children and prompt counts."""
        categories = await self.repo.list_all()
        counts = await self.repo.prompt_counts([c.id for c in categories])
        return [CategoryView(category=c, prompt_count=counts.get(c.id, 0)) for c in categories]

    async def get_category(self, category_id: int) -> CategoryView:
        """One category with relatives, prompt count and recent prompts."""
        view = await self._view(category_id)
        view.prompts = await self.repo.recent_prompts(category_id, limit=RECENT_PROMPTS_LIMIT)
        return view

    # ============ Writes ============

    async def create_category(
        self,
        name: str,
        description: str | None = None,
        color: str | None = None,
        parent_id: int | None = None,
        sort_order: int | None = None,
    ) -> CategoryView:
        """
        Create a category.

        Raises:
            MissingFieldsError: blank name
            ParentNotFoundError: parent missing or owned by someone else
            NameExistsError: a sibling already has this name
        """
        if not name:
            raise MissingFieldsError("Category name is required")

        if parent_id is not None and await self.repo.get_by_id(parent_id) is None:
            raise ParentNotFoundError()

        if await self.repo.name_exists(name, parent_id):
            raise NameExistsError("A category with this name already exists here")

        category = await self.repo.create(
            name=name,
            description=description or None,
            color=color or None,
            parent_id=parent_id,
            sort_order=sort_order,
        )
        return await self._view(category.id)

    async def update_category(self, category_id: int, changes: dict[str, Any]) -> CategoryView:
        """
        Apply a partial update.

        Args:
            category_id: Category to change
            changes: Only the fields the caller sent

        Raises:
            CategoryNotFoundError: category not owned by the caller
            MissingFieldsError: name sent blank
            ParentNotFoundError: new parent missing
            CircularReferenceError: new parent is the category or a descendant
            NameExistsError: name collides among the future siblings
        """
        category = await self._get(category_id)
        changes = dict(changes)

        if "name" in changes and not changes["name"]:
            raise MissingFieldsError("Category name cannot be empty")

        # Non-nullable columns: an explicit null means "leave as is"
        for key in ("color", "sort_order"):
            if key in changes and changes[key] is None:
                del changes[key]
        if "description" in changes and not changes["description"]:
            changes["description"] = None

        if "parent_id" in changes:
            new_parent_id = changes["parent_id"]
            if new_parent_id is not None:
                if new_parent_id != category.id and await self.repo.get_by_id(new_parent_id) is None:
                    raise ParentNotFoundError()
                await self._assert_no_cycle(category.id, new_parent_id)

        if "name" in changes or "parent_id" in changes:
            name = changes.get("name", category.name)
            parent_id = changes.get("parent_id", category.parent_id)
            if await self.repo.name_exists(name, parent_id, exclude_id=category.id):
                raise NameExistsError("A category with this name already exists here")

        await self.repo.update(category, changes)
        return await self._view(category.id)

    async def delete_category(self, category_id: int) -> int:
        """
        Delete a childless category.

        Prompts still filed under it become uncategorized first.

        Returns:
            Number of prompts moved to uncategorized
        """
        await self._get(category_id)

        if await self.repo.has_children(category_id):
            raise HasChildrenError()

        moved = await self.repo.reassign_prompts(category_id)
        await self.repo.delete(category_id)

        logger.info(
            f"Category deleted: id={category_id} user={self.repo.user_id} "
            f"prompts_reassigned={moved}"
        )
        return moved

    async def reorder(self, items: list[tuple[int, int]]) -> tuple[int, int]:
        """
        Set sort orders from (id, sort_order) pairs.

        Each pair is an independent owner-scoped update; ids the caller does
        not own are skipped.

        Returns:
            (updated, skipped)
        """
        updated = 0
        for category_id, sort_order in items:
            if await self.repo.set_sort_order(category_id, sort_order):
                updated += 1
        return updated, len(items) - updated
