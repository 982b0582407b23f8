from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol

from journey_api.services.generation.errors import (
    GenerationBackendError,
    InvalidGenerationOutput,
    PreconditionUnmet,
)
from journey_api.services.generation.ids import IdFactory
from journey_api.services.generation.schemas import FlowSchema, InputT, OutputT
from journey_api.services.generation.templates import TemplateEngine


logger = logging.getLogger(__name__)


class GenerationInvoker(Protocol):
    async def invoke(
        self,
        prompt_text: str,
        output_hint: dict[str, Any] | None = None,
    ) -> str:
        ...


@dataclass(frozen=True)
class FlowContext:
    """Process-wide collaborators handed to every flow."""

    ai_service: GenerationInvoker
    id_factory: IdFactory = field(default_factory=IdFactory)
    engine: TemplateEngine = field(default_factory=TemplateEngine)


class FlowStage(str, enum.Enum):
    EVALUATING = "evaluating"
    FALLBACK = "fallback"
    GENERATING = "generating"
    VALIDATED = "validated"
    FAILED = "failed"


async def run_flow(
    *,
    schema: FlowSchema[InputT, OutputT],
    payload: Any,
    generate: Callable[[InputT], Awaitable[OutputT]],
    check_precondition: Callable[[InputT], None] | None = None,
    build_fallback: Callable[[InputT, PreconditionUnmet], OutputT] | None = None,
    trace: list[FlowStage] | None = None,
) -> OutputT:
    """Drive one request through Evaluating -> {Fallback, Generating} -> {Validated, Failed}.

    Input validation happens before Evaluating, so a malformed request never
    reaches the backend. A fallback artifact is still validated against the
    output shape; a generated artifact is whatever `generate` validated.
    """
    stages = trace if trace is not None else []
    request = schema.validate_input(payload)

    stages.append(FlowStage.EVALUATING)
    if check_precondition is not None:
        try:
            check_precondition(request)
        except PreconditionUnmet as unmet:
            if build_fallback is None:
                raise
            stages.append(FlowStage.FALLBACK)
            logger.info("%s precondition unmet (%s); returning fallback artifact", schema.name, unmet.reason)
            return schema.validate_output(build_fallback(request, unmet))

    stages.append(FlowStage.GENERATING)
    try:
        artifact = await generate(request)
    except (GenerationBackendError, InvalidGenerationOutput) as exc:
        stages.append(FlowStage.FAILED)
        logger.warning("%s generation failed: %s", schema.name, exc)
        raise

    stages.append(FlowStage.VALIDATED)
    return artifact


async def render_and_invoke(
    context: FlowContext,
    *,
    template: str,
    variables: dict[str, Any],
    output_hint: dict[str, Any] | None,
) -> str:
    prompt_text = context.engine.render(template, variables)
    return await context.ai_service.invoke(prompt_text, output_hint)
