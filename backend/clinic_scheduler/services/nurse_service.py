from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduler.models.nurse import Nurse
from clinic_scheduler.repositories.nurse import NurseRepository
from clinic_scheduler.services.profile_service import ProfileService


class NurseService(ProfileService[Nurse]):
    entity_name = "Nurse"
    identifier = "coren"
    identifier_label = "COREN"
    repository_class = NurseRepository

    async def get_by_coren(self, db: AsyncSession, coren: str) -> Nurse:
        return await self.get_by_identifier(db, coren)

    async def list_by_sector(self, db: AsyncSession, sector: str) -> list[Nurse]:
        return await NurseRepository(db).list_by_sector(sector)

    async def list_by_shift(self, db: AsyncSession, shift: str) -> list[Nurse]:
        return await NurseRepository(db).list_by_shift(shift)

    async def list_by_sector_and_shift(self, db: AsyncSession, sector: str, shift: str) -> list[Nurse]:
        return await NurseRepository(db).list_by_sector_and_shift(sector, shift)

    async def list_by_specialization(self, db: AsyncSession, specialization: str) -> list[Nurse]:
        """Active nurses only."""
        return await NurseRepository(db).list_active_by_specialization(specialization)


nurse_service = NurseService()
