import json
import logging
from typing import Any

from starlette.concurrency import run_in_threadpool

from journey_api.domain.ai.providers.base import TextGenerationProvider
from journey_api.services.generation.errors import GenerationBackendError, classify_backend_failure


logger = logging.getLogger(__name__)


def ai_error_detail(exc: Exception) -> str:
    message = " ".join(str(exc).split())
    if not message:
        return "ai_provider_failed"
    return message[:300]


def with_output_hint(prompt_text: str, output_hint: dict[str, Any] | None) -> str:
    if output_hint is None:
        return prompt_text
    schema_text = json.dumps(output_hint, ensure_ascii=False, separators=(",", ":"))
    return (
        f"{prompt_text.rstrip()}\n\n"
        "Respond with a single JSON object only, no code fences, matching this JSON Schema:\n"
        f"{schema_text}"
    )


class AIService:
    """Stateless gateway to the generative backend.

    Built once per process. Without a provider the service runs in degraded
    mode: it can be constructed and shared, but every `invoke` fails with a
    `GenerationBackendError` of kind `config_error`.
    """

    def __init__(
        self,
        *,
        primary: TextGenerationProvider | None,
        unavailable_reason: str = "",
    ) -> None:
        self.primary = primary
        self.unavailable_reason = unavailable_reason

    @property
    def available(self) -> bool:
        return self.primary is not None

    async def invoke(
        self,
        prompt_text: str,
        output_hint: dict[str, Any] | None = None,
    ) -> str:
        if self.primary is None:
            reason = self.unavailable_reason or "no_provider_configured"
            raise GenerationBackendError(f"generation_backend_unavailable:{reason}", kind="config_error")

        prompt = with_output_hint(prompt_text, output_hint)
        try:
            return await run_in_threadpool(
                self.primary.generate_text,
                prompt=prompt,
                json_mode=output_hint is not None,
            )
        except Exception as exc:
            reason = ai_error_detail(exc)
            kind = classify_backend_failure(reason)
            logger.warning("Generation backend call failed (%s): %s", kind, reason)
            raise GenerationBackendError(reason, kind=kind) from exc
