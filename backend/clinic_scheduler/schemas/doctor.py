from pydantic import BaseModel, Field
from typing import Optional
from clinic_scheduler.models.enums import Specialty


class DoctorBase(BaseModel):
    crm: str = Field(..., min_length=1, max_length=20)
    specialty: Specialty
    description: Optional[str] = None


class DoctorCreate(DoctorBase):
    user_id: int


class DoctorUpdate(BaseModel):
    crm: Optional[str] = Field(default=None, min_length=1, max_length=20)
    specialty: Optional[Specialty] = None
    description: Optional[str] = None
    active: Optional[bool] = None


class DoctorResponse(DoctorBase):
    id: int
    user_id: int
    name: Optional[str] = None
    active: bool

    class Config:
        from_attributes = True


class DoctorSummary(BaseModel):
    id: int
    name: Optional[str] = None
    crm: str
    specialty: Specialty

    class Config:
        from_attributes = True
