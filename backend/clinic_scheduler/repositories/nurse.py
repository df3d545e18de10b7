from sqlalchemy import select

from clinic_scheduler.models.nurse import Nurse
from clinic_scheduler.repositories.profile import ProfileRepository


class NurseRepository(ProfileRepository[Nurse]):
    model = Nurse
    identifier = "coren"

    async def list_by_sector(self, sector: str) -> list[Nurse]:
        return await self._scalars(select(Nurse).where(Nurse.sector == sector).order_by(Nurse.id))

    async def list_by_shift(self, shift: str) -> list[Nurse]:
        return await self._scalars(select(Nurse).where(Nurse.shift == shift).order_by(Nurse.id))

    async def list_by_sector_and_shift(self, sector: str, shift: str) -> list[Nurse]:
        return await self._scalars(
            select(Nurse).where(Nurse.sector == sector, Nurse.shift == shift).order_by(Nurse.id)
        )

    async def list_active_by_specialization(self, specialization: str) -> list[Nurse]:
        return await self._scalars(
            select(Nurse)
            .where(Nurse.specialization == specialization, Nurse.active.is_(True))
            .order_by(Nurse.id)
        )
