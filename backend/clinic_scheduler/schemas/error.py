from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    validation_errors: Optional[list[FieldError]] = None
