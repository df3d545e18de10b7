from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from clinic_scheduler.models.enums import AppointmentStatus
from clinic_scheduler.schemas.doctor import DoctorSummary
from clinic_scheduler.schemas.nurse import NurseSummary
from clinic_scheduler.schemas.patient import PatientSummary


class AppointmentCreate(BaseModel):
    doctor_id: int
    patient_id: int
    nurse_id: Optional[int] = None
    date_time: datetime
    reason: Optional[str] = Field(default=None, max_length=500)
    observations: Optional[str] = Field(default=None, max_length=1000)


class AppointmentUpdate(BaseModel):
    """Partial update: only the fields present in the payload are applied."""

    date_time: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    reason: Optional[str] = Field(default=None, max_length=500)
    observations: Optional[str] = Field(default=None, max_length=1000)
    diagnosis: Optional[str] = Field(default=None, max_length=2000)
    prescription: Optional[str] = Field(default=None, max_length=1000)


class AppointmentResponse(BaseModel):
    id: int
    doctor: DoctorSummary
    patient: PatientSummary
    nurse: Optional[NurseSummary] = None
    date_time: datetime
    status: AppointmentStatus
    reason: Optional[str] = None
    observations: Optional[str] = None
    diagnosis: Optional[str] = None
    prescription: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
