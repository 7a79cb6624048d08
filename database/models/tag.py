"""
Tag model for labelling prompts.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow
from .category import DEFAULT_COLOR

if TYPE_CHECKING:
    from .prompt import PromptTag
    from .user import User


class Tag(Base):
    """
    Tag owned by a single user, unique by name per user.

    Deleting a tag removes its prompt associations, never the prompts.
    """

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
    )

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

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    color: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_COLOR,
        nullable=False,
    )

    # Timestamp
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="tags",
    )
    prompt_links: Mapped[list["PromptTag"]] = relationship(
        "PromptTag",
        back_populates="tag",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name})>"


# Indexes
Index("idx_tags_user_id", Tag.user_id)
