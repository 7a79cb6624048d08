"""
Prompt models: prompts, their tag links and their version history.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, SoftDeleteMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .category import Category
    from .tag import Tag
    from .user import User


class Prompt(Base, TimestampMixin, SoftDeleteMixin):
    """
    A saved prompt owned by one user.

    Soft-deleted prompts stay in the table (and keep their versions) but are
    invisible to every read path.
    """

    __tablename__ = "prompts"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Owner
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Content
    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Structured fields
    variables: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSONType,
        default=dict,
        nullable=False,
    )

    # Flags and usage
    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    usage_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="prompts",
    )
    category: Mapped[Optional["Category"]] = relationship(
        "Category",
        back_populates="prompts",
    )
    # Read side only; links are written through PromptTag rows
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary="prompt_tags",
        viewonly=True,
        order_by="Tag.name",
    )
    versions: Mapped[list["PromptVersion"]] = relationship(
        "PromptVersion",
        back_populates="prompt",
        order_by="PromptVersion.version_number.desc()",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Prompt(id={self.id}, title={self.title})>"


class PromptTag(Base):
    """Association between a prompt and a tag."""

    __tablename__ = "prompt_tags"

    prompt_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("prompts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    tag: Mapped["Tag"] = relationship(
        "Tag",
        back_populates="prompt_links",
    )


class PromptVersion(Base):
    """
    Immutable snapshot of a prompt's title and content.

    Version numbers start at 1 and grow by one per content change.
    """

    __tablename__ = "prompt_versions"
    __table_args__ = (
        UniqueConstraint("prompt_id", "version_number", name="uq_prompt_versions_prompt_number"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    prompt_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("prompts.id", ondelete="CASCADE"),
        nullable=False,
    )
    version_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Snapshot
    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    variables: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )
    change_log: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    created_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    prompt: Mapped["Prompt"] = relationship(
        "Prompt",
        back_populates="versions",
    )

    def __repr__(self) -> str:
        return f"<PromptVersion(prompt_id={self.prompt_id}, version={self.version_number})>"


# Indexes
Index("idx_prompts_user_id", Prompt.user_id)
Index("idx_prompts_category_id", Prompt.category_id)
Index("idx_prompts_user_deleted", Prompt.user_id, Prompt.deleted_at)
Index("idx_prompt_tags_tag_id", PromptTag.tag_id)
Index("idx_prompt_versions_prompt_id", PromptVersion.prompt_id)
