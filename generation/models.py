"""Pydantic models for avatar generation."""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class GenerateAvatarRequest(BaseModel):
    """Request body for avatar generation. Both fields are checked by the route."""
    model_config = ConfigDict(populate_by_name=True)

    photo_url: Optional[str] = Field(None, alias="photoUrl", description="Durable URL of the uploaded photo")
    style: Optional[str] = Field(None, description="Free-form style label, e.g. 'anime'")


class GenerateAvatarResponse(BaseModel):
    """Response model for a generated avatar."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(True, description="Always true on success")
    avatar_url: str = Field(..., alias="avatarUrl", description="Durable URL of the generated avatar")
    style: str = Field(..., description="Style label echoed back")
    description: str = Field("", description="Intermediate description of the subject")


class StyleListResponse(BaseModel):
    """Response model for the style menu."""
    styles: List[Dict[str, str]] = Field(..., description="Styles offered by the wizard")
