"""AI services module."""
from ai.services import AIService, AIServiceError, GeminiAIService, get_ai_service

__all__ = [
    "AIService",
    "AIServiceError",
    "GeminiAIService",
    "get_ai_service",
]
