from sqlalchemy import select

from clinic_scheduler.models.doctor import Doctor
from clinic_scheduler.models.enums import Specialty
from clinic_scheduler.repositories.profile import ProfileRepository


class DoctorRepository(ProfileRepository[Doctor]):
    model = Doctor
    identifier = "crm"

    async def list_by_specialty(self, specialty: Specialty) -> list[Doctor]:
        return await self._scalars(
            select(Doctor).where(Doctor.specialty == specialty).order_by(Doctor.id)
        )
