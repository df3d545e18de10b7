from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduler.models.doctor import Doctor
from clinic_scheduler.models.enums import Specialty
from clinic_scheduler.repositories.doctor import DoctorRepository
from clinic_scheduler.services.profile_service import ProfileService


class DoctorService(ProfileService[Doctor]):
    entity_name = "Doctor"
    identifier = "crm"
    identifier_label = "CRM"
    repository_class = DoctorRepository
    required_fields = ("specialty", "active")

    async def get_by_crm(self, db: AsyncSession, crm: str) -> Doctor:
        return await self.get_by_identifier(db, crm)

    async def list_by_specialty(self, db: AsyncSession, specialty: Specialty) -> list[Doctor]:
        return await DoctorRepository(db).list_by_specialty(specialty)


doctor_service = DoctorService()
