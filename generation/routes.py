"""Avatar generation and style routes."""
from typing import Optional

from fastapi import APIRouter, Body, Depends

from ai.services import AIService, get_ai_service
from common.error_messages import ErrorCode, raise_api_error
from common.styles import list_styles
from generation.models import GenerateAvatarRequest, GenerateAvatarResponse, StyleListResponse
from generation.services import GenerationError, generate_avatar
from storage.blob_store import BlobStore, get_blob_store
from utils.logger import get_logger

logger = get_logger("generation.routes")
router = APIRouter(prefix="/api", tags=["generation"])


@router.post("/generate", response_model=GenerateAvatarResponse)
def generate(
    req: Optional[GenerateAvatarRequest] = Body(None),
    ai: AIService = Depends(get_ai_service),
    store: BlobStore = Depends(get_blob_store),
):
    """
    Generate a stylized avatar from an uploaded photo.

    Accepts:
      { photoUrl: "...", style: "..." }

    Behavior:
      - reject missing photoUrl / style before any upstream call
      - describe -> generate -> fetch -> store, all-or-nothing
      - upstream failure details are logged, the client gets a generic message
    """
    photo_url = ((req.photo_url if req else None) or "").strip()
    style = ((req.style if req else None) or "").strip()

    if not photo_url:
        raise_api_error(ErrorCode.NO_PHOTO_URL)
    if not style:
        raise_api_error(ErrorCode.NO_STYLE_SELECTED)

    try:
        result = generate_avatar(photo_url, style, ai=ai, store=store)
    except GenerationError as e:
        logger.error(f"Avatar generation failed at stage '{e.stage.value}': {e}")
        raise_api_error(ErrorCode.GENERATION_FAILED)
    except Exception as e:
        logger.error(f"Unexpected error generating avatar: {e}", exc_info=True)
        raise_api_error(ErrorCode.GENERATION_FAILED)

    return GenerateAvatarResponse(
        success=True,
        avatar_url=result.avatar_url,
        style=result.style,
        description=result.description,
    )


@router.get("/styles", response_model=StyleListResponse)
def styles():
    """List the styles the wizard offers."""
    return StyleListResponse(styles=list_styles())
