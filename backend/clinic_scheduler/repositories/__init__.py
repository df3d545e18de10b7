from clinic_scheduler.repositories.user import UserRepository
from clinic_scheduler.repositories.doctor import DoctorRepository
from clinic_scheduler.repositories.nurse import NurseRepository
from clinic_scheduler.repositories.patient import PatientRepository
from clinic_scheduler.repositories.appointment import AppointmentRepository

__all__ = ["UserRepository", "DoctorRepository", "NurseRepository", "PatientRepository", "AppointmentRepository"]
