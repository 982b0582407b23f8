import json
import unittest

from journey_api.services.generation.errors import InvalidGenerationOutput
from journey_api.services.generation.normalizer_validator import (
    is_placeholder_option,
    normalize_option_text,
    normalize_quiz_options,
)
from journey_api.services.generation.schemas import GRAMMAR_ASSIST_SCHEMA
from journey_api.services.generation.validation import (
    canonicalize,
    parse_json_document,
    validate_structured_text,
)


class CanonicalizeTests(unittest.TestCase):
    def test_equal_structures_serialize_identically(self) -> None:
        first = canonicalize({"b": 1, "a": {"y": [1, 2], "x": "Sugeng enjing"}})
        second = canonicalize({"a": {"x": "Sugeng enjing", "y": [1, 2]}, "b": 1})

        self.assertEqual(first, second)
        self.assertTrue(first.startswith('{\n  "a": {'))

    def test_round_trip_is_idempotent(self) -> None:
        raw = '{"questions":[{"questionText":"Matur nuwun","options":[]}],"title":"Quiz \\u00e9","status":"draft"}'
        parsed = parse_json_document(raw)

        canonical = canonicalize(parsed)

        self.assertEqual(json.loads(canonical), parsed)
        self.assertEqual(canonicalize(json.loads(canonical)), canonical)
        self.assertIn("Quiz é", canonical)


class ParseJsonDocumentTests(unittest.TestCase):
    def test_code_fences_are_stripped(self) -> None:
        parsed = parse_json_document('```json\n{"title": "Greetings"}\n```')
        self.assertEqual(parsed, {"title": "Greetings"})

    def test_parse_failure_keeps_raw_text(self) -> None:
        raw = "Here is your quiz: {not json"
        with self.assertRaises(InvalidGenerationOutput) as ctx:
            parse_json_document(raw)

        self.assertEqual(ctx.exception.raw_text, raw)
        self.assertTrue(ctx.exception.reason.startswith("json_parse_failed:"))

    def test_empty_and_non_standard_json_are_rejected(self) -> None:
        with self.assertRaises(InvalidGenerationOutput) as ctx:
            parse_json_document("   ")
        self.assertEqual(ctx.exception.reason, "empty_output")

        with self.assertRaises(InvalidGenerationOutput):
            parse_json_document('{"score": NaN}')

    def test_deeply_nested_document_is_rejected(self) -> None:
        raw = '{"a":' * 100000 + "1" + "}" * 100000

        with self.assertRaises(InvalidGenerationOutput) as ctx:
            parse_json_document(raw)

        self.assertTrue(ctx.exception.reason.startswith("json_parse_failed:"))
        self.assertEqual(ctx.exception.raw_text, raw)

    def test_structured_text_must_be_an_object(self) -> None:
        with self.assertRaises(InvalidGenerationOutput) as ctx:
            validate_structured_text('["Greetings"]', GRAMMAR_ASSIST_SCHEMA)
        self.assertEqual(ctx.exception.reason, "ai_response_not_object")


class QuizOptionNormalizerTests(unittest.TestCase):
    def test_labels_are_removed(self) -> None:
        self.assertEqual(normalize_option_text("A) Goedemorgen"), "Goedemorgen")
        self.assertEqual(normalize_option_text("2. Goedenavond"), "Goedenavond")
        self.assertEqual(normalize_option_text("Optie 3: Welkom"), "Welkom")
        self.assertEqual(normalize_option_text("Goedemorgen"), "Goedemorgen")

    def test_placeholders_are_detected(self) -> None:
        self.assertTrue(is_placeholder_option(""))
        self.assertTrue(is_placeholder_option("3"))
        self.assertTrue(is_placeholder_option("[Plausible incorrect Dutch word 1]"))
        self.assertFalse(is_placeholder_option("Dag"))

    def test_options_are_deduplicated_keeping_the_correct_flag(self) -> None:
        options = normalize_quiz_options(
            [
                {"text": "A) Goedenavond", "isCorrect": False},
                {"text": "B) Goedemorgen", "isCorrect": False},
                {"text": "goedemorgen", "isCorrect": True},
                {"text": "[Plausible incorrect Dutch word 2]", "isCorrect": False},
                "Welkom",
            ]
        )

        self.assertEqual(
            options,
            [
                {"text": "Goedenavond", "isCorrect": False},
                {"text": "Goedemorgen", "isCorrect": True},
                {"text": "Welkom", "isCorrect": False},
            ],
        )


if __name__ == "__main__":
    unittest.main()
