"""AI services - image description and image generation via Gemini."""
from abc import ABC, abstractmethod
from typing import Optional

from google import genai
from google.genai import types

from config import Config
from common.image_refs import fetch_image_bytes, to_data_uri
from utils.logger import get_logger

logger = get_logger("ai.services")


class AIServiceError(RuntimeError):
    """Raised when an upstream AI call fails."""


class AIService(ABC):
    """
    The two opaque AI capabilities the avatar pipeline relies on.

    ``describe`` turns an image reference plus an instruction into text.
    ``generate`` turns a prompt into a short-lived image reference, or
    ``None`` when the upstream produced no image.
    """

    @abstractmethod
    def describe(self, image_ref: str, instruction: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def generate(self, prompt: str) -> Optional[str]:
        raise NotImplementedError


class GeminiAIService(AIService):
    """AIService backed by the Gemini API (google-genai)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        vision_model: Optional[str] = None,
        image_model: Optional[str] = None,
        client=None,
    ):
        self._api_key = api_key
        self.vision_model = vision_model or Config.GEMINI_VISION_MODEL
        self.image_model = image_model or Config.GEMINI_IMAGE_MODEL
        self._client = client

    @property
    def client(self):
        """Gemini client, created on first use so requests that fail validation never need credentials."""
        if self._client is None:
            try:
                self._client = genai.Client(api_key=self._api_key or Config.get_gemini_api_key())
            except Exception as e:
                logger.error(f"Failed to initialize Gemini client: {e}")
                raise AIServiceError("Failed to connect to AI service")
        return self._client

    def describe(self, image_ref: str, instruction: str) -> str:
        """
        Ask the vision model about the image behind ``image_ref``.

        Returns the response text, or an empty string when the model answered
        without any text.
        """
        try:
            image_bytes, mime_type = fetch_image_bytes(image_ref)
        except Exception as e:
            logger.error(f"Failed to load image for description: {e}")
            raise AIServiceError(f"Failed to load image: {e}")

        logger.info(f"Describing image ({mime_type}, {len(image_bytes)} bytes) with {self.vision_model}")
        try:
            response = self.client.models.generate_content(
                model=self.vision_model,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    instruction,
                ],
            )
        except AIServiceError:
            raise
        except Exception as e:
            logger.error(f"Vision request failed: {e}")
            raise AIServiceError(f"Image description failed: {e}")

        text = getattr(response, "text", None) or ""
        logger.info(f"Description received ({len(text)} chars)")
        return text.strip()

    def generate(self, prompt: str) -> Optional[str]:
        """
        Ask the image model for a single image.

        The first inline image in the response is returned as a ``data:`` URI;
        that reference lives only in memory and must be consumed immediately.
        """
        logger.info(f"Generating image with {self.image_model}: {prompt[:80]}...")
        try:
            response = self.client.models.generate_content(
                model=self.image_model,
                contents=prompt,
                config=types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"]),
            )
        except AIServiceError:
            raise
        except Exception as e:
            logger.error(f"Image generation request failed: {e}")
            raise AIServiceError(f"Image generation failed: {e}")

        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline = getattr(part, "inline_data", None)
                if inline and getattr(inline, "data", None):
                    logger.info(f"Image generated ({inline.mime_type}, {len(inline.data)} bytes)")
                    return to_data_uri(inline.data, inline.mime_type or "image/png")

        logger.warning("Image model returned no image data")
        return None


_ai_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    """FastAPI dependency returning the process-wide AI service."""
    global _ai_service
    if _ai_service is None:
        _ai_service = GeminiAIService()
    return _ai_service
