"""Pydantic models for photo upload."""
from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response model for a successful photo upload."""
    success: bool = Field(True, description="Always true on success")
    url: str = Field(..., description="Durable URL of the stored photo")
