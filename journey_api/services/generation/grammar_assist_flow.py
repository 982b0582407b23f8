from __future__ import annotations

from typing import Any

from journey_api.services.generation.pipeline_runtime import FlowContext, FlowStage, render_and_invoke, run_flow
from journey_api.services.generation.prompts import GRAMMAR_CONTENT_ASSIST_TEMPLATE
from journey_api.services.generation.schemas import (
    GRAMMAR_ASSIST_SCHEMA,
    GrammarContentAssistInput,
    GrammarContentAssistOutput,
)
from journey_api.services.generation.validation import validate_structured_text


DEFAULT_FEEDBACK_MESSAGE = "Content reviewed by AI."


async def assist_grammar_content(
    payload: GrammarContentAssistInput | dict[str, Any],
    *,
    context: FlowContext,
    trace: list[FlowStage] | None = None,
) -> GrammarContentAssistOutput:
    # 필드별 번역/교정 판단은 프롬프트 안에서 백엔드가 수행한다
    async def generate(request: GrammarContentAssistInput) -> GrammarContentAssistOutput:
        raw_text = await render_and_invoke(
            context,
            template=GRAMMAR_CONTENT_ASSIST_TEMPLATE,
            variables=request.model_dump(),
            output_hint=GRAMMAR_ASSIST_SCHEMA.output_hint(),
        )
        output = validate_structured_text(raw_text, GRAMMAR_ASSIST_SCHEMA)
        feedback = (output.feedbackMessage or "").strip() or DEFAULT_FEEDBACK_MESSAGE
        return output.model_copy(update={"feedbackMessage": feedback})

    return await run_flow(schema=GRAMMAR_ASSIST_SCHEMA, payload=payload, generate=generate, trace=trace)
