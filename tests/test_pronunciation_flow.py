import unittest

from journey_api.services.generation.errors import InputValidationError
from journey_api.services.generation.pipeline_runtime import FlowStage
from journey_api.services.generation.pronunciation_flow import (
    DEFAULT_RULE,
    get_pronunciation_feedback,
    select_rule,
)


AUDIO = "data:audio/webm;base64,GkXfo59ChoEBQveBAULygQRC84EIQoKEd2VibUKHgQRChYEC"


class PronunciationFeedbackFlowTests(unittest.IsolatedAsyncioTestCase):
    async def test_matur_nuwun_uses_its_own_range_and_tip(self) -> None:
        trace: list[FlowStage] = []

        result = await get_pronunciation_feedback({"targetWord": "Matur nuwun", "audioDataUri": AUDIO}, trace=trace)

        self.assertGreaterEqual(result.score, 75)
        self.assertLessEqual(result.score, 94)
        self.assertIn("'r'", result.feedbackText)
        self.assertIn(f"Score: {result.score}/100.", result.feedbackText)
        self.assertEqual(result.isCorrect, result.score >= 80)
        self.assertTrue(result.phoneticComparison)
        self.assertEqual(trace, [FlowStage.EVALUATING, FlowStage.GENERATING, FlowStage.VALIDATED])

    async def test_word_match_is_case_insensitive(self) -> None:
        self.assertIs(select_rule("MATUR NUWUN, Bu"), select_rule("matur nuwun"))
        self.assertIs(select_rule("Kula"), DEFAULT_RULE)

    async def test_same_recording_gets_same_result(self) -> None:
        payload = {"targetWord": "Sugeng enjing", "audioDataUri": AUDIO}

        first = await get_pronunciation_feedback(payload)
        second = await get_pronunciation_feedback(payload)

        self.assertEqual(first, second)

    async def test_general_words_stay_in_default_range(self) -> None:
        for index in range(20):
            result = await get_pronunciation_feedback(
                {"targetWord": "Kula", "audioDataUri": f"data:audio/wav;base64,UklGR{index}"}
            )
            self.assertGreaterEqual(result.score, 70)
            self.assertLessEqual(result.score, 99)

    async def test_dutch_feedback(self) -> None:
        result = await get_pronunciation_feedback(
            {"targetWord": "Matur nuwun", "audioDataUri": AUDIO, "languageContext": "nl"}
        )

        self.assertIn("Let op de 'r'", result.feedbackText)

    async def test_invalid_audio_reference_is_rejected(self) -> None:
        for audio in ("", "not-a-data-uri", "data:audio/webm,plain"):
            with self.assertRaises(InputValidationError) as ctx:
                await get_pronunciation_feedback({"targetWord": "Kula", "audioDataUri": audio})
            self.assertEqual(ctx.exception.field, "audioDataUri")


if __name__ == "__main__":
    unittest.main()
