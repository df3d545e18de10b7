from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduler.models.patient import Patient
from clinic_scheduler.repositories.patient import PatientRepository
from clinic_scheduler.services.profile_service import ProfileService


class PatientService(ProfileService[Patient]):
    entity_name = "Patient"
    identifier = "cpf"
    identifier_label = "CPF"
    repository_class = PatientRepository
    required_fields = ("date_of_birth", "active")

    async def get_by_cpf(self, db: AsyncSession, cpf: str) -> Patient:
        return await self.get_by_identifier(db, cpf)


patient_service = PatientService()
