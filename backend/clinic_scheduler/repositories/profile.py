from typing import Any, Optional, TypeVar

from sqlalchemy import exists, select

from clinic_scheduler.models.user import User
from clinic_scheduler.repositories.base import BaseRepository

ProfileT = TypeVar("ProfileT")


class ProfileRepository(BaseRepository[ProfileT]):
    """
    Queries shared by the doctor, nurse and patient tables. Each of them links
    one user and carries one unique registration number, named by ``identifier``.
    """

    identifier: str

    @property
    def _identifier_column(self):
        return getattr(self.model, self.identifier)

    async def get_by_identifier(self, value: Any) -> Optional[ProfileT]:
        return await self.db.scalar(select(self.model).where(self._identifier_column == value))

    async def exists_by_identifier(self, value: Any) -> bool:
        return bool(await self.db.scalar(select(exists().where(self._identifier_column == value))))

    async def get_by_user_id(self, user_id: int) -> Optional[ProfileT]:
        return await self.db.scalar(select(self.model).where(self.model.user_id == user_id))

    async def list_active(self) -> list[ProfileT]:
        return await self._scalars(
            select(self.model).where(self.model.active.is_(True)).order_by(self.model.id)
        )

    async def search_by_name(self, fragment: str) -> list[ProfileT]:
        return await self._scalars(
            select(self.model)
            .join(User, self.model.user_id == User.id)
            .where(User.name.ilike(f"%{fragment}%"))
            .order_by(User.name)
        )
