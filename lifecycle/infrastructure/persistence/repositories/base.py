"""Base repository: generic model lookup, add, write-back and delete."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.domain.exceptions import ResourceNotFoundException
from lifecycle.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository over one ORM model.

    Subclasses expose domain entities; the helpers here work on ORM rows.
    Nothing commits: the caller's session owns the transaction.
    """

    resource_type: str = "resource"

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_model(self, entity_id: str, *, for_update: bool = False) -> ModelType | None:
        """Return a single row by primary key, or None. for_update takes a row lock."""
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _require_model(self, entity_id: str) -> ModelType:
        """Return the row by primary key or raise ResourceNotFoundException."""
        obj = await self._get_model(entity_id)
        if obj is None:
            raise ResourceNotFoundException(self.resource_type, entity_id)
        return obj

    async def _add(self, obj: ModelType) -> ModelType:
        """Persist a new row and reload server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _add_all(self, objs: list[ModelType]) -> list[ModelType]:
        """Persist new rows in one flush."""
        self.db.add_all(objs)
        await self.db.flush()
        return objs

    async def _delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()
