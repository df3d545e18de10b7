from pydantic import BaseModel, Field
from typing import Optional


class NurseBase(BaseModel):
    coren: str = Field(..., min_length=1, max_length=20)
    sector: Optional[str] = Field(default=None, max_length=100)
    shift: Optional[str] = Field(default=None, max_length=50)
    specialization: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None


class NurseCreate(NurseBase):
    user_id: int


class NurseUpdate(BaseModel):
    coren: Optional[str] = Field(default=None, min_length=1, max_length=20)
    sector: Optional[str] = Field(default=None, max_length=100)
    shift: Optional[str] = Field(default=None, max_length=50)
    specialization: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    active: Optional[bool] = None


class NurseResponse(NurseBase):
    id: int
    user_id: int
    name: Optional[str] = None
    active: bool

    class Config:
        from_attributes = True


class NurseSummary(BaseModel):
    id: int
    name: Optional[str] = None
    coren: str

    class Config:
        from_attributes = True
