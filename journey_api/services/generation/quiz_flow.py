from __future__ import annotations

import json
import logging
from typing import Any

from journey_api.services.generation.errors import InvalidGenerationOutput, PreconditionUnmet
from journey_api.services.generation.normalizer_validator import normalize_quiz_options
from journey_api.services.generation.pipeline_runtime import FlowContext, FlowStage, render_and_invoke, run_flow
from journey_api.services.generation.prompts import LANGUAGE_NAMES, QUIZ_FOR_WORD_TEMPLATE
from journey_api.services.generation.schemas import (
    FILL_IN_THE_BLANK_TYPES,
    QUIZ_FOR_WORD_SCHEMA,
    QuizDocument,
    QuizForWordInput,
    QuizForWordOutput,
    validate_generated,
)
from journey_api.services.generation.validation import canonicalize, parse_json_document


logger = logging.getLogger(__name__)

QUIZ_ID_PREFIX = "quiz-ai"
QUESTION_ID_PREFIX = "q-ai"
MISSING_EXAMPLE_SENTENCE = "missing example sentence"


def _category(request: QuizForWordInput) -> str:
    return f"AI Generated - {request.word.category or 'Uncategorized'}"


def _require_example_sentence(request: QuizForWordInput) -> None:
    if request.targetQuestionType not in FILL_IN_THE_BLANK_TYPES:
        return
    if not (request.word.exampleSentenceJavanese or "").strip():
        raise PreconditionUnmet(MISSING_EXAMPLE_SENTENCE)


def _fallback_texts(request: QuizForWordInput) -> dict[str, str]:
    word = request.word.javanese
    question_type = request.targetQuestionType
    if request.targetLanguage == "nl":
        return {
            "title": f"Kan '{question_type}' niet maken voor: {word}",
            "description": (
                f"Dit vraagtype heeft een Javaanse voorbeeldzin nodig ({MISSING_EXAMPLE_SENTENCE}) "
                f"en '{word}' heeft er geen."
            ),
            "question": (
                f"Er is geen vraag gemaakt: '{word}' mist een Javaanse voorbeeldzin. "
                "Voeg een voorbeeldzin toe en probeer het opnieuw."
            ),
            "feedback": f"Quiz '{question_type}' voor \"{word}\" niet gemaakt: {MISSING_EXAMPLE_SENTENCE}.",
        }
    return {
        "title": f"Cannot generate '{question_type}' for: {word}",
        "description": (
            f"This question type requires a Javanese example sentence ({MISSING_EXAMPLE_SENTENCE}) "
            f"and '{word}' has none."
        ),
        "question": (
            f"No question was generated: '{word}' is missing an example sentence in Javanese. "
            "Add an example sentence and try again."
        ),
        "feedback": f"Could not generate '{question_type}' quiz for \"{word}\": {MISSING_EXAMPLE_SENTENCE}.",
    }


def _build_fallback_quiz(request: QuizForWordInput, context: FlowContext) -> dict[str, Any]:
    texts = _fallback_texts(request)
    document = {
        "id": context.id_factory.new_id(QUIZ_ID_PREFIX, request.word.id),
        "title": texts["title"],
        "description": texts["description"],
        "category": _category(request),
        "difficulty": request.difficulty,
        "status": "draft",
        "questions": [
            {
                "id": context.id_factory.new_id(QUESTION_ID_PREFIX, request.word.id),
                "questionType": request.targetQuestionType,
                "questionText": texts["question"],
                "options": [],
            }
        ],
    }
    quiz = validate_generated(QuizDocument, document)
    return {
        "quizJsonString": canonicalize(quiz.model_dump(exclude_none=True)),
        "feedbackMessage": texts["feedback"],
    }


def _unwrap_quiz_document(parsed: Any, raw_text: str) -> dict[str, Any]:
    # 일부 모델은 {"quizJsonString": "<json>"} 봉투로 감싸서 반환한다
    if isinstance(parsed, dict) and isinstance(parsed.get("quizJsonString"), str):
        try:
            parsed = parse_json_document(parsed["quizJsonString"])
        except InvalidGenerationOutput as exc:
            raise InvalidGenerationOutput(f"envelope_{exc.reason}", raw_text=raw_text) from exc
    elif isinstance(parsed, dict) and isinstance(parsed.get("quiz"), dict) and "questions" not in parsed:
        parsed = parsed["quiz"]
    if not isinstance(parsed, dict):
        raise InvalidGenerationOutput("quiz_not_object", raw_text=raw_text)
    return parsed


def _repair_question(question: Any, request: QuizForWordInput, context: FlowContext, raw_text: str) -> dict[str, Any]:
    if not isinstance(question, dict):
        raise InvalidGenerationOutput("question_not_object", raw_text=raw_text)

    repaired = dict(question)
    repaired["id"] = context.id_factory.new_id(QUESTION_ID_PREFIX, request.word.id)
    repaired["questionType"] = request.targetQuestionType

    if request.targetQuestionType == "fill-in-the-blank-text-input":
        repaired["options"] = [{"text": request.word.javanese, "isCorrect": True}]
        return repaired

    options = normalize_quiz_options(question.get("options"))
    correct = sum(1 for option in options if option["isCorrect"])
    if len(options) < 2:
        raise InvalidGenerationOutput("options_insufficient", raw_text=raw_text)
    if correct != 1:
        raise InvalidGenerationOutput(f"correct_option_count:{correct}", raw_text=raw_text)
    repaired["options"] = options
    return repaired


def _repair_quiz_document(
    document: dict[str, Any],
    request: QuizForWordInput,
    context: FlowContext,
    raw_text: str,
) -> dict[str, Any]:
    questions = document.get("questions")
    if not isinstance(questions, list) or not questions:
        raise InvalidGenerationOutput("questions_missing", raw_text=raw_text)
    if len(questions) > 1:
        logger.info("Generated quiz for %s has %d questions; keeping the first", request.word.id, len(questions))

    repaired = dict(document)
    repaired.pop("quizJsonString", None)
    repaired["id"] = context.id_factory.new_id(QUIZ_ID_PREFIX, request.word.id)
    repaired["difficulty"] = request.difficulty
    repaired["status"] = "draft"
    if not str(repaired.get("title") or "").strip():
        repaired["title"] = f"AI Quiz for: {request.word.javanese}"
    if not str(repaired.get("category") or "").strip():
        repaired["category"] = _category(request)
    repaired["questions"] = [_repair_question(questions[0], request, context, raw_text)]
    return repaired


def _success_feedback(request: QuizForWordInput) -> str:
    if request.targetLanguage == "nl":
        return f"Quiz-JSON voor \"{request.word.javanese}\" gemaakt. Controleer hem voor publicatie."
    return f"Successfully generated quiz JSON for \"{request.word.javanese}\". Review it before publishing."


async def generate_quiz_for_word(
    payload: QuizForWordInput | dict[str, Any],
    *,
    context: FlowContext,
    trace: list[FlowStage] | None = None,
) -> QuizForWordOutput:
    async def generate(request: QuizForWordInput) -> QuizForWordOutput:
        variables = request.model_dump()
        variables["targetLanguageName"] = LANGUAGE_NAMES[request.targetLanguage]
        raw_text = await render_and_invoke(
            context,
            template=QUIZ_FOR_WORD_TEMPLATE,
            variables=variables,
            output_hint=QUIZ_FOR_WORD_SCHEMA.output_hint(),
        )

        document = _unwrap_quiz_document(parse_json_document(raw_text), raw_text)
        repaired = _repair_quiz_document(document, request, context, raw_text)
        quiz = validate_generated(QuizDocument, repaired, raw_text=raw_text)
        return QUIZ_FOR_WORD_SCHEMA.validate_output(
            {
                "quizJsonString": canonicalize(quiz.model_dump(exclude_none=True)),
                "feedbackMessage": _success_feedback(request),
            },
            raw_text=raw_text,
        )

    return await run_flow(
        schema=QUIZ_FOR_WORD_SCHEMA,
        payload=payload,
        generate=generate,
        check_precondition=_require_example_sentence,
        build_fallback=lambda request, _unmet: _build_fallback_quiz(request, context),
        trace=trace,
    )


def load_quiz(output: QuizForWordOutput) -> dict[str, Any]:
    return json.loads(output.quizJsonString)
