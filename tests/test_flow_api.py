import json
import unittest

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request

from journey_api import main
from journey_api.api import flows
from journey_api.domain.ai import AIService
from journey_api.services.generation.pipeline_runtime import FlowContext
from journey_api.services.generation.schemas import (
    AdaptiveLearningGoalsInput,
    PronunciationFeedbackInput,
    QuizForWordInput,
)


class _StaticInvoker:
    def __init__(self, response: str):
        self.response = response

    async def invoke(self, prompt_text: str, output_hint: dict | None = None) -> str:
        return self.response


class FlowRouteTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._original_get_flow_context = flows._get_flow_context

    def tearDown(self) -> None:
        flows._get_flow_context = self._original_get_flow_context

    def _use(self, ai_service) -> None:
        context = FlowContext(ai_service=ai_service)
        flows._get_flow_context = lambda: context

    async def test_goals_route_returns_plain_payload(self) -> None:
        self._use(
            _StaticInvoker(
                json.dumps({"dailyGoals": ["a", "b", "c"], "explanation": "why", "progress": "good"})
            )
        )

        body = await flows.adaptive_learning_goals(AdaptiveLearningGoalsInput(learningProgress="Started"))

        self.assertEqual(body["dailyGoals"], ["a", "b", "c"])
        self.assertEqual(body["progress"], "good")

    async def test_unconfigured_backend_maps_to_service_unavailable(self) -> None:
        self._use(AIService(primary=None, unavailable_reason="gemini_api_key_missing"))

        with self.assertRaises(HTTPException) as ctx:
            await flows.adaptive_learning_goals(AdaptiveLearningGoalsInput(learningProgress="Started"))

        detail = ctx.exception.detail
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(detail["error_code"], "config_error")
        self.assertFalse(detail["retryable"])
        self.assertTrue(detail["detail"].startswith("adaptive_learning_goals_failed:config_error:"))

    async def test_invalid_output_maps_to_unprocessable(self) -> None:
        self._use(_StaticInvoker("not json"))

        with self.assertRaises(HTTPException) as ctx:
            await flows.quiz_for_word(
                QuizForWordInput(
                    word={"id": "w1", "javanese": "Sugeng enjing", "dutch": "Goedemorgen"},
                    targetQuestionType="multiple-choice",
                )
            )

        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(ctx.exception.detail["error_code"], "invalid_output")
        self.assertTrue(ctx.exception.detail["retryable"])

    async def test_degraded_mode_still_serves_fallback_and_pronunciation(self) -> None:
        self._use(AIService(primary=None))

        quiz = await flows.quiz_for_word(
            QuizForWordInput(
                word={"id": "w1", "javanese": "Sugeng enjing", "dutch": "Goedemorgen"},
                targetQuestionType="fill-in-the-blank-mcq",
            )
        )
        feedback = await flows.pronunciation_feedback(
            PronunciationFeedbackInput(targetWord="Matur nuwun", audioDataUri="data:audio/webm;base64,GkXf")
        )

        self.assertIn("missing example sentence", quiz["feedbackMessage"])
        self.assertTrue(75 <= feedback["score"] <= 94)

    def test_health_reports_degraded_backend(self) -> None:
        self._use(AIService(primary=None))
        self.assertEqual(flows.generation_backend_status(), "degraded")

        self._use(_StaticInvoker("{}"))
        self.assertEqual(flows.generation_backend_status(), "available")

    async def test_request_validation_uses_structured_payload(self) -> None:
        request = Request(
            {
                "type": "http",
                "method": "POST",
                "path": "/api/goals",
                "query_string": b"",
                "headers": [(b"x-trace-id", b"trace-9")],
            }
        )
        exc = RequestValidationError(
            [{"type": "missing", "loc": ("body", "learningProgress"), "msg": "Field required", "input": {}}]
        )

        response = await main.handle_request_validation(request, exc)
        body = json.loads(response.body)

        self.assertEqual(response.status_code, 422)
        self.assertEqual(body["error_code"], "invalid_input")
        self.assertEqual(body["message"], "learningProgress: Field required")
        self.assertEqual(body["trace_id"], "trace-9")
        self.assertTrue(body["detail"].startswith("adaptive_learning_goals_failed:invalid_input:"))
        self.assertEqual(flows.pipeline_for_path("/api/unknown"), "request")


if __name__ == "__main__":
    unittest.main()
