"""
Shared repository plumbing over an AsyncSession.

Repositories never commit: the request-scoped session from ``get_db`` owns the
transaction. Writes are flushed immediately so that storage-level UNIQUE
violations surface inside the operation that caused them, where they are turned
into a BusinessError.
"""

import logging
from typing import Generic, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from clinic_scheduler.database import Base
from clinic_scheduler.exceptions import BusinessError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, entity_id: int) -> Optional[ModelT]:
        return await self.db.get(self.model, entity_id)

    async def list_all(self) -> list[ModelT]:
        return await self._scalars(select(self.model).order_by(self.model.id))

    async def count(self) -> int:
        return await self.db.scalar(select(func.count()).select_from(self.model)) or 0

    async def add(self, entity: ModelT, conflict_message: str) -> ModelT:
        self.db.add(entity)
        await self._flush(conflict_message)
        return entity

    async def save(self, entity: ModelT, conflict_message: str) -> ModelT:
        await self._flush(conflict_message)
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.db.delete(entity)
        await self.db.flush()

    async def _scalars(self, query: Select) -> list[ModelT]:
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _flush(self, conflict_message: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Integrity conflict on %s: %s", self.model.__tablename__, e.orig)
            raise BusinessError(conflict_message) from e
