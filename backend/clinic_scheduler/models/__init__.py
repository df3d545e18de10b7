from clinic_scheduler.models.user import User
from clinic_scheduler.models.doctor import Doctor
from clinic_scheduler.models.nurse import Nurse
from clinic_scheduler.models.patient import Patient
from clinic_scheduler.models.appointment import Appointment
from clinic_scheduler.models.enums import Role, Specialty, AppointmentStatus

__all__ = ["User", "Doctor", "Nurse", "Patient", "Appointment", "Role", "Specialty", "AppointmentStatus"]
