from pydantic import BaseModel, Field
from datetime import date
from typing import Optional


class PatientBase(BaseModel):
    cpf: str = Field(..., min_length=11, max_length=11, pattern=r"^\d{11}$")
    date_of_birth: date
    address: Optional[str] = None
    sus_card_number: Optional[str] = Field(default=None, max_length=20)
    health_plan: Optional[str] = Field(default=None, max_length=100)
    emergency_contact: Optional[str] = Field(default=None, max_length=200)
    medical_notes: Optional[str] = None


class PatientCreate(PatientBase):
    user_id: int


class PatientUpdate(BaseModel):
    cpf: Optional[str] = Field(default=None, min_length=11, max_length=11, pattern=r"^\d{11}$")
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    sus_card_number: Optional[str] = Field(default=None, max_length=20)
    health_plan: Optional[str] = Field(default=None, max_length=100)
    emergency_contact: Optional[str] = Field(default=None, max_length=200)
    medical_notes: Optional[str] = None
    active: Optional[bool] = None


class PatientResponse(PatientBase):
    id: int
    user_id: int
    name: Optional[str] = None
    active: bool

    class Config:
        from_attributes = True


class PatientSummary(BaseModel):
    id: int
    name: Optional[str] = None
    cpf: str

    class Config:
        from_attributes = True
