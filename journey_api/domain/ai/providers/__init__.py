"""Generative backend providers."""

from journey_api.domain.ai.providers.gemini import GeminiProvider
from journey_api.domain.ai.providers.openai import OpenAIProvider

__all__ = ["GeminiProvider", "OpenAIProvider"]
