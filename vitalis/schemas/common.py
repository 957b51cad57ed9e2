"""Common/shared response schemas."""
from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str


class HealthResponse(BaseModel):
    status: str
    database: str
    detail: Optional[str] = None
