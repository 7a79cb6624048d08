"""
Base class for repositories over user-owned rows.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class OwnedRepository(Generic[ModelT]):
    """
    Repository bound to one owner.

    Every query built through _owned() is filtered by the owner's user id,
    so a row belonging to another user is indistinguishable from a row that
    does not exist.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession, user_id: int):
        self.session = session
        self.user_id = user_id

    def _owned(self, query: Select[Any] | None = None) -> Select[Any]:
        """Scope a select to the owner (defaults to selecting the model)."""
        if query is None:
            query = select(self.model)
        return query.where(self.model.user_id == self.user_id)

    async def _apply(self, row: ModelT, fields: dict[str, Any]) -> ModelT:
        """Set the given attributes on a row and flush."""
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.flush()
        return row
