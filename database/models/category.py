"""
Category model: a per-user tree of folders for prompts.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .prompt import Prompt
    from .user import User

DEFAULT_COLOR = "#6B7280"


class Category(Base, TimestampMixin):
    """
    Hierarchical category owned by a single user.

    Names are unique among siblings (same owner, same parent). The parent
    chain must stay acyclic; the service layer checks this before any
    re-parent.
    """

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("user_id", "parent_id", "name", name="uq_categories_user_parent_name"),
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
        String(100),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    color: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_COLOR,
        nullable=False,
    )

    # Tree
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=True,
    )
    sort_order: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="categories",
    )
    parent: Mapped[Optional["Category"]] = relationship(
        "Category",
        remote_side=[id],
        back_populates="children",
    )
    children: Mapped[list["Category"]] = relationship(
        "Category",
        back_populates="parent",
        order_by="Category.sort_order",
        passive_deletes=True,
    )
    prompts: Mapped[list["Prompt"]] = relationship(
        "Prompt",
        back_populates="category",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, parent_id={self.parent_id})>"


# Indexes
Index("idx_categories_user_id", Category.user_id)
Index("idx_categories_parent_id", Category.parent_id)
