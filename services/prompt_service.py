"""
Prompt management: CRUD, usage tracking, copying and version history.

Every create writes version 1; every update that sends a title or content
appends the next version, whether or not the text changed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import (
    CategoryNotFoundError,
    MissingFieldsError,
    PromptNotFoundError,
    TagNotFoundError,
)
from database.models import Prompt, PromptVersion
from database.repositories import CategoryRepository, PromptRepository, TagRepository

logger = logging.getLogger(__name__)

INITIAL_VERSION_LOG = "initial version"
UPDATE_VERSION_LOG = "content update"
COPY_SUFFIX = " (copy)"
TITLE_MAX_LENGTH = 200
RECENT_VERSIONS_LIMIT = 10

# Fields a caller may change directly on the prompt row
UPDATABLE_FIELDS = (
    "title",
    "content",
    "description",
    "category_id",
    "variables",
    "metadata",
    "is_favorite",
    "is_public",
)


@dataclass
class PromptView:
    """A prompt with category and tags loaded, plus version summaries on detail."""

    prompt: Prompt
    versions: list[PromptVersion] = field(default_factory=list)


class PromptService:
    """Business rules for one user's prompts."""

    def __init__(
        self,
        repo: PromptRepository,
        category_repo: CategoryRepository,
        tag_repo: TagRepository,
    ):
        self.repo = repo
        self.category_repo = category_repo
        self.tag_repo = tag_repo

    # ============ Helpers ============

    async def _get(self, prompt_id: int) -> Prompt:
        prompt = await self.repo.get_by_id(prompt_id)
        if prompt is None:
            raise PromptNotFoundError()
        return prompt

    async def _reload(self, prompt_id: int) -> Prompt:
        """Fetch fresh state with category and tags after writes."""
        prompt = await self.repo.get_by_id(prompt_id, with_relations=True)
        if prompt is None:
            raise PromptNotFoundError()
        return prompt

    async def _check_category(self, category_id: int | None) -> None:
        if category_id is not None and await self.category_repo.get_by_id(category_id) is None:
            raise CategoryNotFoundError()

    async def _resolve_tags(self, tag_ids: list[int]) -> list[int]:
        """De-duplicate tag ids and make sure the caller owns all of them."""
        unique_ids = list(dict.fromkeys(tag_ids))
        found = {tag.id for tag in await self.tag_repo.get_many(unique_ids)}
        missing = [tag_id for tag_id in unique_ids if tag_id not in found]
        if missing:
            raise TagNotFoundError(details={"tagIds": missing})
        return unique_ids

    # ============ Reads ============

    async def list_prompts(
        self,
        page: int = 1,
        page_size: int = 20,
        search: str | None = None,
        category_id: int | None = None,
        is_favorite: bool | None = None,
        tag_names: list[str] | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> tuple[list[Prompt], int]:
        """One page of the caller's prompts and the total match count."""
        return await self.repo.list_prompts(
            search=search or None,
            category_id=category_id,
            is_favorite=is_favorite,
            tag_names=tag_names or None,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=page_size,
            offset=(page - 1) * page_size,
        )

    async def get_prompt(self, prompt_id: int) -> PromptView:
        """Prompt detail with the newest version summaries."""
        prompt = await self._reload(prompt_id)
        versions = await self.repo.recent_versions(prompt.id, limit=RECENT_VERSIONS_LIMIT)
        return PromptView(prompt=prompt, versions=versions)

    # ============ Writes ============

    async def create_prompt(self, data: dict[str, Any]) -> PromptView:
        """
        Create a prompt, link its tags and record version 1.

        Args:
            data: title, content and any optional prompt fields; tags holds
                tag ids

        Raises:
            MissingFieldsError: blank title or content
            CategoryNotFoundError: category not owned by the caller
            TagNotFoundError: a tag id not owned by the caller
        """
        if not data.get("title") or not data.get("content"):
            raise MissingFieldsError("Title and content are required")

        category_id = data.get("category_id")
        await self._check_category(category_id)
        tag_ids = await self._resolve_tags(data.get("tags") or [])

        prompt = await self.repo.create(
            title=data["title"],
            content=data["content"],
            description=data.get("description") or None,
            category_id=category_id,
            variables=data.get("variables") or [],
            metadata_=data.get("metadata") or {},
            is_favorite=bool(data.get("is_favorite", False)),
            is_public=bool(data.get("is_public", False)),
        )
        if tag_ids:
            await self.repo.replace_tags(prompt.id, tag_ids)
        await self.repo.add_version(prompt, change_log=INITIAL_VERSION_LOG)

        logger.info(f"Prompt created: id={prompt.id} user={self.repo.user_id}")
        return PromptView(prompt=await self._reload(prompt.id))

    async def update_prompt(self, prompt_id: int, changes: dict[str, Any]) -> PromptView:
        """
        Apply a partial update.

        Args:
            prompt_id: Prompt to change
            changes: Only the fields the caller sent; tags replaces the whole
                tag set

        Raises:
            PromptNotFoundError: prompt not owned, missing or deleted
            MissingFieldsError: title or content sent blank
            CategoryNotFoundError: category not owned by the caller
            TagNotFoundError: a tag id not owned by the caller
        """
        prompt = await self._get(prompt_id)

        for key in ("title", "content"):
            if key in changes and not changes[key]:
                raise MissingFieldsError(f"{key.capitalize()} cannot be empty")

        if "category_id" in changes:
            await self._check_category(changes["category_id"])

        tag_ids = None
        if changes.get("tags") is not None:
            tag_ids = await self._resolve_tags(changes["tags"])

        fields: dict[str, Any] = {}
        for key in UPDATABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if key == "description":
                fields["description"] = value or None
            elif key == "category_id":
                # Null moves the prompt to uncategorized
                fields["category_id"] = value
            elif key == "metadata":
                if value is not None:
                    fields["metadata_"] = value
            elif value is not None:
                fields[key] = value

        await self.repo.update(prompt, fields)
        if tag_ids is not None:
            await self.repo.replace_tags(prompt.id, tag_ids)

        if "title" in changes or "content" in changes:
            await self.repo.add_version(prompt, change_log=UPDATE_VERSION_LOG)

        return PromptView(prompt=await self._reload(prompt.id))

    async def delete_prompt(self, prompt_id: int) -> None:
        """Soft-delete a prompt; tags, category and versions are untouched."""
        prompt = await self._get(prompt_id)
        await self.repo.soft_delete(prompt)
        logger.info(f"Prompt deleted: id={prompt_id} user={self.repo.user_id}")

    async def use_prompt(self, prompt_id: int) -> PromptView:
        """Count one use of a prompt."""
        if not await self.repo.increment_usage(prompt_id):
            raise PromptNotFoundError()
        return PromptView(prompt=await self._reload(prompt_id))

    async def copy_prompt(self, prompt_id: int) -> PromptView:
        """
        Duplicate a prompt with its tags.

        The copy starts with no versions and a zero usage count.
        """
        source = await self._get(prompt_id)
        tag_ids = await self.repo.tag_ids(source.id)

        title = source.title[: TITLE_MAX_LENGTH - len(COPY_SUFFIX)] + COPY_SUFFIX
        copy = await self.repo.create(
            title=title,
            content=source.content,
            description=source.description,
            category_id=source.category_id,
            variables=list(source.variables or []),
            metadata_=dict(source.metadata_ or {}),
        )
        if tag_ids:
            await self.repo.replace_tags(copy.id, tag_ids)

        logger.info(f"Prompt copied: source={source.id} copy={copy.id} user={self.repo.user_id}")
        return PromptView(prompt=await self._reload(copy.id))
