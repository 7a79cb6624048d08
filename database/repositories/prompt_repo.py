"""
Prompt repository.

Provides owner-scoped data access for prompts, their tag links and their
append-only version history. Soft-deleted prompts are excluded from every
read and write here.
"""

from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.orm import selectinload

from database.models import Prompt, PromptTag, PromptVersion, Tag
from database.models.base import utcnow

from .base import OwnedRepository

SORT_COLUMNS = {
    "createdAt": Prompt.created_at,
    "usageCount": Prompt.usage_count,
    "lastUsedAt": Prompt.last_used_at,
    "title": Prompt.title,
}


class PromptRepository(OwnedRepository[Prompt]):
    """Repository for Prompt, PromptTag and PromptVersion rows of one user."""

    model = Prompt

    def _live(self):
        """Owned, non-deleted prompts."""
        return self._owned().where(Prompt.deleted_at.is_(None))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_by_id(
        self,
        prompt_id: int,
        with_relations: bool = False,
    ) -> Prompt | None:
        """Get an owned, non-deleted prompt, optionally with category and tags."""
        query = self._live().where(Prompt.id == prompt_id)
        if with_relations:
            query = query.options(
                selectinload(Prompt.category),
                selectinload(Prompt.tags),
            ).execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_prompts(
        self,
        search: str | None = None,
        category_id: int | None = None,
        is_favorite: bool | None = None,
        tag_names: list[str] | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Prompt], int]:
        """
        List prompts with filtering, search, sorting and offset pagination.

        Args:
            search: Substring matched against title, content or description
            category_id: Only prompts directly in this category
            is_favorite: Filter on the favorite flag
            tag_names: Prompts carrying at least one of these tag names
            sort_by: createdAt, usageCount, lastUsedAt or title
            sort_order: asc or desc
            limit: Page size
            offset: Rows to skip

        Returns:
            Tuple of (prompts with category and tags loaded, total count)
        """
        query = self._live()

        if search:
            # Substring match; % and _ in the search text are literal
            query = query.where(
                Prompt.title.icontains(search, autoescape=True)
                | Prompt.content.icontains(search, autoescape=True)
                | Prompt.description.icontains(search, autoescape=True)
            )

        if category_id is not None:
            query = query.where(Prompt.category_id == category_id)

        if is_favorite is not None:
            query = query.where(Prompt.is_favorite.is_(is_favorite))

        if tag_names:
            tagged = (
                select(PromptTag.prompt_id)
                .join(Tag, Tag.id == PromptTag.tag_id)
                .where(Tag.user_id == self.user_id, Tag.name.in_(tag_names))
            )
            query = query.where(Prompt.id.in_(tagged))

        # Total count
        count_query = select(func.count()).select_from(query.subquery())
        total = await self.session.scalar(count_query) or 0

        # Sorting; ties broken by id in the same direction
        column = SORT_COLUMNS.get(sort_by, Prompt.created_at)
        if sort_order == "asc":
            query = query.order_by(column.asc(), Prompt.id.asc())
        else:
            query = query.order_by(column.desc(), Prompt.id.desc())

        query = (
            query.options(selectinload(Prompt.category), selectinload(Prompt.tags))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def tag_ids(self, prompt_id: int) -> list[int]:
        """IDs of the tags linked to a prompt."""
        result = await self.session.execute(
            select(PromptTag.tag_id).where(PromptTag.prompt_id == prompt_id)
        )
        return list(result.scalars().all())

    async def recent_versions(self, prompt_id: int, limit: int = 10) -> list[PromptVersion]:
        """Newest version rows of a prompt."""
        result = await self.session.execute(
            select(PromptVersion)
            .where(PromptVersion.prompt_id == prompt_id)
            .order_by(PromptVersion.version_number.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def version_count(self, prompt_id: int) -> int:
        """Number of version rows of a prompt."""
        count = await self.session.scalar(
            select(func.count(PromptVersion.id)).where(PromptVersion.prompt_id == prompt_id)
        )
        return count or 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, **fields: Any) -> Prompt:
        """Create a prompt for the owner."""
        prompt = Prompt(user_id=self.user_id, **fields)
        self.session.add(prompt)
        await self.session.flush()
        return prompt

    async def update(self, prompt: Prompt, fields: dict[str, Any]) -> Prompt:
        """Apply a partial update to a prompt."""
        return await self._apply(prompt, fields)

    async def replace_tags(self, prompt_id: int, tag_ids: list[int]) -> None:
        """Replace a prompt's tag links: delete all, then insert the given set."""
        await self.session.execute(delete(PromptTag).where(PromptTag.prompt_id == prompt_id))
        if tag_ids:
            await self.session.execute(
                insert(PromptTag),
                [{"prompt_id": prompt_id, "tag_id": tag_id} for tag_id in tag_ids],
            )

    async def add_version(
        self,
        prompt: Prompt,
        change_log: str | None = None,
    ) -> PromptVersion:
        """Append a snapshot of the prompt as version max + 1."""
        current = await self.session.scalar(
            select(func.max(PromptVersion.version_number)).where(
                PromptVersion.prompt_id == prompt.id
            )
        )
        version = PromptVersion(
            prompt_id=prompt.id,
            version_number=(current or 0) + 1,
            title=prompt.title,
            content=prompt.content,
            description=prompt.description,
            variables=list(prompt.variables or []),
            change_log=change_log,
            created_by=self.user_id,
        )
        self.session.add(version)
        await self.session.flush()
        return version

    async def soft_delete(self, prompt: Prompt) -> Prompt:
        """Hide a prompt by stamping deleted_at."""
        prompt.deleted_at = utcnow()
        await self.session.flush()
        return prompt

    async def increment_usage(self, prompt_id: int) -> bool:
        """
        Increment the usage counter and stamp last_used_at in one statement.

        Returns False when no owned, non-deleted prompt matched.
        """
        result = await self.session.execute(
            update(Prompt)
            .where(
                Prompt.id == prompt_id,
                Prompt.user_id == self.user_id,
                Prompt.deleted_at.is_(None),
            )
            .values(usage_count=Prompt.usage_count + 1, last_used_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)
