import logging

from journey_api.core.config import Settings
from journey_api.domain.ai.providers.gemini import GeminiProvider
from journey_api.domain.ai.providers.openai import OpenAIProvider
from journey_api.domain.ai.service import AIService


logger = logging.getLogger(__name__)


def build_ai_service(settings: Settings) -> AIService:
    missing = _missing_credential(settings)
    if missing:
        logger.warning(
            "%s is not set; generation backend runs in degraded mode and every generation call will fail.",
            missing,
        )
        return AIService(primary=None, unavailable_reason=f"{settings.ai_provider}_api_key_missing")

    return AIService(primary=_build_primary_provider(settings))


def _missing_credential(settings: Settings) -> str:
    if settings.ai_provider == "gemini" and not settings.gemini_api_key:
        return "GEMINI_API_KEY"
    if settings.ai_provider == "openai" and not settings.openai_api_key:
        return "OPENAI_API_KEY"
    return ""


def _build_primary_provider(settings: Settings) -> GeminiProvider | OpenAIProvider:
    if settings.ai_provider == "gemini":
        return GeminiProvider(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout_sec=settings.ai_request_timeout_sec,
            temperature=settings.ai_temperature,
        )

    if settings.ai_provider == "openai":
        return OpenAIProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_sec=settings.ai_request_timeout_sec,
            temperature=settings.ai_temperature,
        )

    raise ValueError(f"unsupported_ai_provider:{settings.ai_provider}")
