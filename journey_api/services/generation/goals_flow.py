from __future__ import annotations

import logging
from typing import Any

from journey_api.services.generation.pipeline_runtime import FlowContext, FlowStage, render_and_invoke, run_flow
from journey_api.services.generation.prompts import ADAPTIVE_LEARNING_GOALS_TEMPLATE, LANGUAGE_NAMES
from journey_api.services.generation.schemas import (
    GOALS_SCHEMA,
    AdaptiveLearningGoalsInput,
    AdaptiveLearningGoalsOutput,
)
from journey_api.services.generation.validation import parse_json_object


logger = logging.getLogger(__name__)

MAX_DAILY_GOALS = 5


def _prompt_variables(request: AdaptiveLearningGoalsInput) -> dict[str, Any]:
    variables = request.model_dump()
    variables["targetLanguageName"] = LANGUAGE_NAMES[request.targetLanguage]
    return variables


def _repair_goals(raw: dict[str, Any]) -> dict[str, Any]:
    repaired = dict(raw)
    goals = raw.get("dailyGoals")
    if isinstance(goals, list):
        cleaned = [" ".join(str(goal).split()) for goal in goals if isinstance(goal, str) and goal.strip()]
        if len(cleaned) > MAX_DAILY_GOALS:
            logger.info("Trimming %d generated goals to %d", len(cleaned), MAX_DAILY_GOALS)
        repaired["dailyGoals"] = cleaned[:MAX_DAILY_GOALS]
    for key in ("explanation", "progress"):
        if isinstance(raw.get(key), str):
            repaired[key] = raw[key].strip()
    return repaired


async def generate_adaptive_learning_goals(
    payload: AdaptiveLearningGoalsInput | dict[str, Any],
    *,
    context: FlowContext,
    trace: list[FlowStage] | None = None,
) -> AdaptiveLearningGoalsOutput:
    async def generate(request: AdaptiveLearningGoalsInput) -> AdaptiveLearningGoalsOutput:
        raw_text = await render_and_invoke(
            context,
            template=ADAPTIVE_LEARNING_GOALS_TEMPLATE,
            variables=_prompt_variables(request),
            output_hint=GOALS_SCHEMA.output_hint(),
        )
        parsed = parse_json_object(raw_text)
        return GOALS_SCHEMA.validate_output(_repair_goals(parsed), raw_text=raw_text)

    return await run_flow(schema=GOALS_SCHEMA, payload=payload, generate=generate, trace=trace)
