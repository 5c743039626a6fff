"""Base repository: primary-key lookup and flush/refresh helpers shared by repositories."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from officeflow.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Base repository over one ORM model.

    Repositories flush but never commit; the use case that owns the session
    decides the transaction boundary.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_model(self, entity_id: str) -> ModelType | None:
        """Return a single ORM row by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new row and load server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def save(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached row and reload server-side values."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
