"""
User model for registered accounts.
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .category import Category
    from .prompt import Prompt
    from .tag import Tag


class User(Base, TimestampMixin, SoftDeleteMixin):
    """
    User model representing registered accounts.

    Users are soft-deleted; a deleted user can neither log in nor
    authenticate with a previously issued token.
    """

    __tablename__ = "users"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Identity
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
    )
    # Stored lower-cased
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    avatar_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Opaque client preferences
    settings: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        default=dict,
        nullable=False,
    )

    # Relationships
    categories: Mapped[list["Category"]] = relationship(
        "Category",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="raise",
    )
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="raise",
    )
    prompts: Mapped[list["Prompt"]] = relationship(
        "Prompt",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"


# Indexes
Index("idx_users_username", User.username)
Index("idx_users_email", User.email)
