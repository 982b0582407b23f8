"""Generative backend gateway and provider abstractions."""

from journey_api.domain.ai.factory import build_ai_service
from journey_api.domain.ai.service import AIService

__all__ = ["AIService", "build_ai_service"]
