"""
Avatar generation pipeline.

One request runs a straight-line sequence:

    received -> described -> image-generated -> rehosted -> done

Any stage may fail, except that an empty description never stops the
pipeline: generation proceeds with whatever text the vision model gave.
A missing generated image, on the other hand, is fatal. Nothing is retried;
the generated image reference is short-lived and is fetched exactly once.
"""
import mimetypes
import re
import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from config import Config
from ai.services import AIService
from common.image_refs import fetch_image_bytes
from common.styles import style_display_name
from storage.blob_store import BlobStore
from utils.logger import get_logger

logger = get_logger("generation.services")


class GenerationStage(str, Enum):
    RECEIVED = "received"
    DESCRIBED = "described"
    IMAGE_GENERATED = "image-generated"
    REHOSTED = "rehosted"
    DONE = "done"
    FAILED = "failed"


class GenerationError(RuntimeError):
    """A pipeline stage failed. ``stage`` is the stage that was being attempted."""

    def __init__(self, stage: GenerationStage, message: str):
        super().__init__(message)
        self.stage = stage


class AvatarResult(BaseModel):
    avatar_url: str
    style: str
    description: str


def build_description_instruction(style: str) -> str:
    name = style_display_name(style)
    return (
        f"Describe this person's facial features in detail for constructing a {name}-style avatar. "
        "Focus on face shape, eyes, nose, mouth, hair and any distinctive features. Be concise."
    )


def build_generation_prompt(style: str, description: str) -> str:
    name = style_display_name(style)
    prompt = f"Create a {name}-style avatar portrait of a person."
    if description:
        prompt += f" Based on this description: {description}."
    prompt += (
        f" The avatar should maintain the likeness of the person while applying the {name} artistic style."
        " Produce a single square (1:1) image, head and shoulders, centered, with a clean background."
    )
    return prompt


def style_slug(style: str) -> str:
    """Filesystem- and URL-safe form of a free-form style label."""
    slug = re.sub(r"[^a-z0-9]+", "-", style.strip().lower()).strip("-")
    return slug[:48] or "style"


def avatar_pathname(style: str, mime_type: str, now_ms: Optional[int] = None) -> str:
    """Storage key for a generated avatar: ``<prefix>/<epoch-ms>-<style>.<ext>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = mimetypes.guess_extension(mime_type or "") or ".png"
    if ext == ".jpe":
        ext = ".jpg"
    return f"{Config.AVATAR_PREFIX}/{now_ms}-{style_slug(style)}{ext}"


def generate_avatar(photo_url: str, style: str, ai: AIService, store: BlobStore) -> AvatarResult:
    """
    Describe the photo, generate a stylized avatar, and re-host it.

    Args:
        photo_url: Durable URL of the uploaded photo
        style: Non-empty style label
        ai: Describe/generate capabilities
        store: Blob store for the final avatar

    Returns:
        AvatarResult with the durable avatar URL, the style and the description

    Raises:
        GenerationError: If any upstream call or the final write fails
    """
    stage = GenerationStage.RECEIVED
    logger.info(f"[{stage.value}] Avatar generation for style '{style}' from {photo_url[:80]}")

    try:
        description = ai.describe(photo_url, build_description_instruction(style))
    except Exception as e:
        logger.error(f"[{GenerationStage.FAILED.value}] Description failed: {e}")
        raise GenerationError(GenerationStage.DESCRIBED, f"Description failed: {e}")
    description = (description or "").strip()
    stage = GenerationStage.DESCRIBED
    if description:
        logger.info(f"[{stage.value}] Description: {description[:100]}...")
    else:
        logger.warning(f"[{stage.value}] Vision service returned no text; continuing with empty description")

    try:
        image_ref = ai.generate(build_generation_prompt(style, description))
    except Exception as e:
        logger.error(f"[{GenerationStage.FAILED.value}] Image generation failed: {e}")
        raise GenerationError(GenerationStage.IMAGE_GENERATED, f"Image generation failed: {e}")
    if not image_ref:
        logger.error(f"[{GenerationStage.FAILED.value}] Generation failed upstream: no image reference returned")
        raise GenerationError(GenerationStage.IMAGE_GENERATED, "generation failed upstream")
    stage = GenerationStage.IMAGE_GENERATED
    logger.info(f"[{stage.value}] Generated image reference received")

    try:
        image_bytes, mime_type = fetch_image_bytes(image_ref)
        blob = store.put(avatar_pathname(style, mime_type), image_bytes, content_type=mime_type, access="public")
    except Exception as e:
        logger.error(f"[{GenerationStage.FAILED.value}] Rehosting generated image failed: {e}")
        raise GenerationError(GenerationStage.REHOSTED, f"Rehosting failed: {e}")
    stage = GenerationStage.REHOSTED
    logger.info(f"[{stage.value}] Avatar stored as {blob.pathname}")

    stage = GenerationStage.DONE
    logger.info(f"[{stage.value}] Avatar ready: {blob.url}")
    return AvatarResult(avatar_url=blob.url, style=style, description=description)
