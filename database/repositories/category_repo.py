"""
Category repository.

Provides owner-scoped data access for the category tree, prompt counts per
category and the reassignment of prompts when a category is removed.
"""

from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import selectinload

from database.models import Category, Prompt

from .base import OwnedRepository


class CategoryRepository(OwnedRepository[Category]):
    """Repository for Category rows owned by one user."""

    model = Category

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_all(self) -> list[Category]:
        """
        List every category of the owner with parent and children loaded.

        Ordered by parent id (roots first), then sort order, then name.
        """
        query = (
            self._owned()
            .options(selectinload(Category.parent), selectinload(Category.children))
            .order_by(
                Category.parent_id.asc().nulls_first(),
                Category.sort_order.asc(),
                Category.name.asc(),
            )
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_by_id(
        self,
        category_id: int,
        with_relations: bool = False,
    ) -> Category | None:
        """Get an owned category by ID, optionally with parent and children."""
        query = self._owned().where(Category.id == category_id)
        if with_relations:
            query = query.options(
                selectinload(Category.parent),
                selectinload(Category.children),
            ).execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def name_exists(
        self,
        name: str,
        parent_id: int | None,
        exclude_id: int | None = None,
    ) -> bool:
        """Check whether a sibling with this name exists under parent_id."""
        query = self._owned(select(Category.id)).where(Category.name == name)
        if parent_id is None:
            query = query.where(Category.parent_id.is_(None))
        else:
            query = query.where(Category.parent_id == parent_id)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is not None

    async def has_children(self, category_id: int) -> bool:
        """Check whether any category has this one as its parent."""
        result = await self.session.execute(
            self._owned(select(Category.id)).where(Category.parent_id == category_id).limit(1)
        )
        return result.first() is not None

    async def prompt_counts(self, category_ids: list[int]) -> dict[int, int]:
        """Count non-deleted prompts per category."""
        if not category_ids:
            return {}
        result = await self.session.execute(
            select(Prompt.category_id, func.count(Prompt.id))
            .where(
                Prompt.user_id == self.user_id,
                Prompt.category_id.in_(category_ids),
                Prompt.deleted_at.is_(None),
            )
            .group_by(Prompt.category_id)
        )
        return {category_id: count for category_id, count in result.all()}

    async def recent_prompts(self, category_id: int, limit: int = 10) -> list[Prompt]:
        """Most recently created non-deleted prompts directly in a category."""
        result = await self.session.execute(
            select(Prompt)
            .where(
                Prompt.user_id == self.user_id,
                Prompt.category_id == category_id,
                Prompt.deleted_at.is_(None),
            )
            .order_by(Prompt.created_at.desc(), Prompt.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(
        self,
        name: str,
        description: str | None = None,
        color: str | None = None,
        parent_id: int | None = None,
        sort_order: int | None = None,
    ) -> Category:
        """Create a category for the owner."""
        category = Category(
            user_id=self.user_id,
            name=name,
            description=description,
            parent_id=parent_id,
        )
        if color is not None:
            category.color = color
        if sort_order is not None:
            category.sort_order = sort_order
        self.session.add(category)
        await self.session.flush()
        return category

    async def update(self, category: Category, fields: dict[str, Any]) -> Category:
        """Apply a partial update to a category."""
        return await self._apply(category, fields)

    async def reassign_prompts(self, category_id: int) -> int:
        """
        Move every prompt in a category to uncategorized.

        Soft-deleted prompts are moved too so the category row can be removed.
        Returns the number of prompts touched.
        """
        result = await self.session.execute(
            update(Prompt)
            .where(Prompt.user_id == self.user_id, Prompt.category_id == category_id)
            .values(category_id=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def delete(self, category_id: int) -> bool:
        """Hard-delete an owned category row."""
        result = await self.session.execute(
            delete(Category)
            .where(Category.id == category_id, Category.user_id == self.user_id)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    async def set_sort_order(self, category_id: int, sort_order: int) -> bool:
        """Set the sort order of one owned category. False if not owned."""
        result = await self.session.execute(
            update(Category)
            .where(Category.id == category_id, Category.user_id == self.user_id)
            .values(sort_order=sort_order)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)
