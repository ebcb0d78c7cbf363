"""Common schemas."""

from typing import Dict
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    services: Dict[str, str]


class SuccessResponse(BaseModel):
    """Generic success response."""
    success: bool = True
    message: str
