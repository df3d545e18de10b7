from pydantic import BaseModel, Field
from clinic_scheduler.models.enums import Role


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: int
    username: str
    role: Role
