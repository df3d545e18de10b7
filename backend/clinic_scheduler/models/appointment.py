from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from clinic_scheduler.clock import utcnow
from clinic_scheduler.database import Base
from clinic_scheduler.models.enums import AppointmentStatus


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    nurse_id = Column(Integer, ForeignKey("nurses.id", ondelete="SET NULL"), index=True)
    date_time = Column(DateTime, nullable=False, index=True)
    status = Column(
        Enum(AppointmentStatus, native_enum=False, length=20),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        index=True,
    )
    reason = Column(String(500))
    observations = Column(Text)  # cancellation notes are appended here
    diagnosis = Column(String(2000))
    prescription = Column(String(1000))
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow)

    doctor = relationship("Doctor", lazy="selectin")
    patient = relationship("Patient", lazy="selectin")
    nurse = relationship("Nurse", lazy="selectin")
