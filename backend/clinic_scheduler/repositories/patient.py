from clinic_scheduler.models.patient import Patient
from clinic_scheduler.repositories.profile import ProfileRepository


class PatientRepository(ProfileRepository[Patient]):
    model = Patient
    identifier = "cpf"
