from functools import lru_cache
from typing import Any, Awaitable

from fastapi import APIRouter

from journey_api.core.config import get_settings
from journey_api.domain.ai import build_ai_service
from journey_api.services.generation.error_policy import http_exception_for
from journey_api.services.generation.errors import GenerationError
from journey_api.services.generation.goals_flow import generate_adaptive_learning_goals
from journey_api.services.generation.grammar_assist_flow import assist_grammar_content
from journey_api.services.generation.pipeline_runtime import FlowContext
from journey_api.services.generation.pronunciation_flow import get_pronunciation_feedback
from journey_api.services.generation.quiz_flow import generate_quiz_for_word
from journey_api.services.generation.schemas import (
    GOALS_SCHEMA,
    GRAMMAR_ASSIST_SCHEMA,
    PRONUNCIATION_SCHEMA,
    QUIZ_FOR_WORD_SCHEMA,
    AdaptiveLearningGoalsInput,
    GrammarContentAssistInput,
    PronunciationFeedbackInput,
    QuizForWordInput,
)


API_PREFIX = "/api"

router = APIRouter(prefix=API_PREFIX, tags=["generation"])

# 요청 검증 실패도 같은 pipeline 이름으로 응답한다
PIPELINE_BY_PATH = {
    f"{API_PREFIX}/goals": GOALS_SCHEMA.name,
    f"{API_PREFIX}/quiz-for-word": QUIZ_FOR_WORD_SCHEMA.name,
    f"{API_PREFIX}/grammar-assist": GRAMMAR_ASSIST_SCHEMA.name,
    f"{API_PREFIX}/pronunciation-feedback": PRONUNCIATION_SCHEMA.name,
}


@lru_cache(maxsize=1)
def _get_flow_context() -> FlowContext:
    return FlowContext(ai_service=build_ai_service(get_settings()))


def pipeline_for_path(path: str) -> str:
    return PIPELINE_BY_PATH.get(path.rstrip("/"), "request")


def generation_backend_status() -> str:
    ai_service = _get_flow_context().ai_service
    return "available" if getattr(ai_service, "available", True) else "degraded"


async def _run(pipeline: str, call: Awaitable[Any]) -> dict[str, Any]:
    try:
        result = await call
    except GenerationError as exc:
        raise http_exception_for(exc, pipeline=pipeline) from exc
    return result.model_dump()


@router.post("/goals")
async def adaptive_learning_goals(payload: AdaptiveLearningGoalsInput) -> dict[str, Any]:
    return await _run(
        GOALS_SCHEMA.name,
        generate_adaptive_learning_goals(payload, context=_get_flow_context()),
    )


@router.post("/quiz-for-word")
async def quiz_for_word(payload: QuizForWordInput) -> dict[str, Any]:
    return await _run(
        QUIZ_FOR_WORD_SCHEMA.name,
        generate_quiz_for_word(payload, context=_get_flow_context()),
    )


@router.post("/grammar-assist")
async def grammar_assist(payload: GrammarContentAssistInput) -> dict[str, Any]:
    return await _run(
        GRAMMAR_ASSIST_SCHEMA.name,
        assist_grammar_content(payload, context=_get_flow_context()),
    )


@router.post("/pronunciation-feedback")
async def pronunciation_feedback(payload: PronunciationFeedbackInput) -> dict[str, Any]:
    return await _run(PRONUNCIATION_SCHEMA.name, get_pronunciation_feedback(payload))
