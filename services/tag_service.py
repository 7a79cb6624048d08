"""
Tag management for one user.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import (
    AllExistsError,
    DuplicateNamesError,
    MissingFieldsError,
    NameExistsError,
    TagNotFoundError,
)
from database.models import Prompt, Tag
from database.repositories import TagRepository

logger = logging.getLogger(__name__)

RECENT_PROMPTS_LIMIT = 20
STATS_LIMIT = 20


@dataclass
class TagView:
    """A tag plus its prompt count and, on detail reads, recent prompts."""

    tag: Tag
    prompt_count: int = 0
    prompts: list[Prompt] = field(default_factory=list)


@dataclass
class BatchResult:
    """Outcome of a batch create."""

    created: list[Tag]
    existing_names: list[str]


class TagService:
    """Business rules for one user's tags."""

    def __init__(self, repo: TagRepository):
        self.repo = repo

    async def _get(self, tag_id: int) -> Tag:
        tag = await self.repo.get_by_id(tag_id)
        if tag is None:
            raise TagNotFoundError()
        return tag

    async def list_tags(self, search: str | None = None) -> list[TagView]:
        """Tags ordered by name, optionally filtered by a name substring."""
        rows = await self.repo.list_with_counts(search=search or None)
        return [TagView(tag=tag, prompt_count=count) for tag, count in rows]

    async def get_stats(self) -> list[TagView]:
        """First tags by name with their prompt counts."""
        rows = await self.repo.list_with_counts(limit=STATS_LIMIT)
        return [TagView(tag=tag, prompt_count=count) for tag, count in rows]

    async def get_tag(self, tag_id: int) -> TagView:
        """One tag with its count and most recent prompts."""
        tag = await self._get(tag_id)
        return TagView(
            tag=tag,
            prompt_count=await self.repo.prompt_count(tag.id),
            prompts=await self.repo.recent_prompts(tag.id, limit=RECENT_PROMPTS_LIMIT),
        )

    async def create_tag(self, name: str, color: str | None = None) -> TagView:
        """Create a tag; names are unique per user."""
        if not name:
            raise MissingFieldsError("Tag name is required")
        if await self.repo.get_by_name(name) is not None:
            raise NameExistsError("A tag with this name already exists")

        tag = await self.repo.create(name=name, color=color or None)
        return TagView(tag=tag)

    async def update_tag(self, tag_id: int, changes: dict[str, Any]) -> TagView:
        """Partial update; uniqueness is re-checked only when the name changes."""
        tag = await self._get(tag_id)
        changes = {key: value for key, value in changes.items() if key in ("name", "color")}

        if "name" in changes:
            if not changes["name"]:
                raise MissingFieldsError("Tag name cannot be empty")
            if changes["name"] != tag.name:
                other = await self.repo.get_by_name(changes["name"])
                if other is not None and other.id != tag.id:
                    raise NameExistsError("A tag with this name already exists")

        if "color" in changes and not changes["color"]:
            del changes["color"]

        await self.repo.update(tag, changes)
        return TagView(tag=tag, prompt_count=await self.repo.prompt_count(tag.id))

    async def delete_tag(self, tag_id: int) -> None:
        """Delete a tag and its prompt links."""
        await self._get(tag_id)
        await self.repo.delete(tag_id)

    async def create_batch(self, items: list[dict[str, Any]]) -> BatchResult:
        """
        Create several tags at once.

        Names already used by the caller are skipped and reported.

        Raises:
            MissingFieldsError: empty batch or a blank name
            DuplicateNamesError: the batch repeats a name
            AllExistsError: every name already exists
        """
        if not items:
            raise MissingFieldsError("At least one tag is required")

        names = [item["name"] for item in items]
        if not all(names):
            raise MissingFieldsError("Every tag needs a name")
        if len(set(names)) != len(names):
            raise DuplicateNamesError()

        existing = await self.repo.existing_names(names)
        to_create = [item for item in items if item["name"] not in existing]
        if not to_create:
            raise AllExistsError()

        created = await self.repo.create_many(to_create)
        existing_names = [name for name in names if name in existing]

        logger.info(
            f"Tag batch: user={self.repo.user_id} created={len(created)} "
            f"existing={len(existing_names)}"
        )
        return BatchResult(created=created, existing_names=existing_names)
