from typing import Optional

from sqlalchemy import exists, select

from clinic_scheduler.models.enums import Role
from clinic_scheduler.models.user import User
from clinic_scheduler.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self.db.scalar(select(User).where(User.username == username))

    async def exists_by_username(self, username: str) -> bool:
        return bool(await self.db.scalar(select(exists().where(User.username == username))))

    async def exists_by_email(self, email: str) -> bool:
        return bool(await self.db.scalar(select(exists().where(User.email == email))))

    async def list_by_role(self, role: Role) -> list[User]:
        return await self._scalars(select(User).where(User.role == role).order_by(User.id))

    async def list_active(self) -> list[User]:
        return await self._scalars(select(User).where(User.active.is_(True)).order_by(User.id))
