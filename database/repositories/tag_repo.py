"""
Tag repository.

Provides owner-scoped data access for tags, their prompt-association counts
and batch creation.
"""

from typing import Any

from sqlalchemy import and_, delete, func, select

from database.models import Prompt, PromptTag, Tag

from .base import OwnedRepository


class TagRepository(OwnedRepository[Tag]):
    """Repository for Tag rows owned by one user."""

    model = Tag

    def _with_counts(self):
        """Owned tags joined to a count of their non-deleted prompts."""
        return (
            self._owned(select(Tag, func.count(Prompt.id).label("prompt_count")))
            .outerjoin(PromptTag, PromptTag.tag_id == Tag.id)
            .outerjoin(
                Prompt,
                and_(Prompt.id == PromptTag.prompt_id, Prompt.deleted_at.is_(None)),
            )
            .group_by(Tag.id)
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_with_counts(
        self,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[tuple[Tag, int]]:
        """List owned tags by name, each with its prompt count."""
        query = self._with_counts()
        if search:
            query = query.where(Tag.name.icontains(search, autoescape=True))
        query = query.order_by(Tag.name.asc())
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return [(tag, count) for tag, count in result.all()]

    async def get_by_id(self, tag_id: int) -> Tag | None:
        """Get an owned tag by ID."""
        result = await self.session.execute(self._owned().where(Tag.id == tag_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Tag | None:
        """Get an owned tag by exact name."""
        result = await self.session.execute(self._owned().where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_many(self, tag_ids: list[int]) -> list[Tag]:
        """Get the owned tags among the given IDs."""
        if not tag_ids:
            return []
        result = await self.session.execute(self._owned().where(Tag.id.in_(tag_ids)))
        return list(result.scalars().all())

    async def existing_names(self, names: list[str]) -> set[str]:
        """Return which of the given names the owner already uses."""
        if not names:
            return set()
        result = await self.session.execute(
            self._owned(select(Tag.name)).where(Tag.name.in_(names))
        )
        return set(result.scalars().all())

    async def prompt_count(self, tag_id: int) -> int:
        """Count non-deleted prompts linked to a tag."""
        count = await self.session.scalar(
            select(func.count(Prompt.id))
            .join(PromptTag, PromptTag.prompt_id == Prompt.id)
            .where(PromptTag.tag_id == tag_id, Prompt.deleted_at.is_(None))
        )
        return count or 0

    async def recent_prompts(self, tag_id: int, limit: int = 20) -> list[Prompt]:
        """Most recently created non-deleted prompts carrying a tag."""
        result = await self.session.execute(
            select(Prompt)
            .join(PromptTag, PromptTag.prompt_id == Prompt.id)
            .where(
                PromptTag.tag_id == tag_id,
                Prompt.user_id == self.user_id,
                Prompt.deleted_at.is_(None),
            )
            .order_by(Prompt.created_at.desc(), Prompt.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, name: str, color: str | None = None) -> Tag:
        """Create a tag for the owner."""
        tag = Tag(user_id=self.user_id, name=name)
        if color is not None:
            tag.color = color
        self.session.add(tag)
        await self.session.flush()
        return tag

    async def create_many(self, items: list[dict[str, Any]]) -> list[Tag]:
        """Create several tags in one flush. Items carry name and optional color."""
        tags = []
        for item in items:
            tag = Tag(user_id=self.user_id, name=item["name"])
            if item.get("color") is not None:
                tag.color = item["color"]
            tags.append(tag)
        self.session.add_all(tags)
        await self.session.flush()
        return tags

    async def update(self, tag: Tag, fields: dict[str, Any]) -> Tag:
        """Apply a partial update to a tag."""
        return await self._apply(tag, fields)

    async def delete(self, tag_id: int) -> bool:
        """Delete an owned tag and its prompt links; prompts are untouched."""
        tag = await self.get_by_id(tag_id)
        if tag is None:
            return False

        await self.session.execute(delete(PromptTag).where(PromptTag.tag_id == tag_id))
        await self.session.execute(
            delete(Tag)
            .where(Tag.id == tag_id, Tag.user_id == self.user_id)
            .execution_options(synchronize_session=False)
        )
        return True
