from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from clinic_scheduler.models.enums import Role


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=20)


class RegisterRequest(UserBase):
    password: str = Field(..., min_length=6, max_length=72)


class UserCreate(RegisterRequest):
    role: Role = Role.PATIENT


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    role: Optional[Role] = None
    active: Optional[bool] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=72)


class UserResponse(BaseModel):
    id: int
    username: str
    name: str
    email: str
    phone: Optional[str] = None
    role: Role
    active: bool

    class Config:
        from_attributes = True
