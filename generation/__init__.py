"""Avatar generation module."""
from generation.models import GenerateAvatarRequest, GenerateAvatarResponse
from generation.services import (
    AvatarResult,
    GenerationError,
    GenerationStage,
    generate_avatar,
)

__all__ = [
    "GenerateAvatarRequest",
    "GenerateAvatarResponse",
    "AvatarResult",
    "GenerationError",
    "GenerationStage",
    "generate_avatar",
]
