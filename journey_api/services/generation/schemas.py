from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from journey_api.services.generation.errors import InputValidationError, InvalidGenerationOutput


Language = Literal["en", "nl"]
LanguageLevel = Literal["Beginner", "Intermediate", "Advanced"]
Formality = Literal["ngoko", "krama", "madya"]
Difficulty = Literal["easy", "medium", "hard"]
QuizStatus = Literal["published", "draft", "archived"]
QuestionType = Literal[
    "multiple-choice",
    "translation-word-to-dutch",
    "translation-sentence-to-dutch",
    "translation-word-to-javanese",
    "translation-sentence-to-javanese",
    "fill-in-the-blank-mcq",
    "fill-in-the-blank-text-input",
]

FILL_IN_THE_BLANK_TYPES = frozenset({"fill-in-the-blank-mcq", "fill-in-the-blank-text-input"})

AUDIO_DATA_URI_PATTERN = r"^data:[\w.+-]+/[\w.+-]+(?:;[^;,]+)*;base64,[A-Za-z0-9+/=\s]+$"


class ShapeModel(BaseModel):
    # 알 수 없는 추가 필드는 버린다
    model_config = ConfigDict(extra="ignore")


# --- adaptive learning goals ---


class RecentScore(ShapeModel):
    quizName: str
    score: float


class AdaptiveLearningGoalsInput(ShapeModel):
    learningProgress: str = Field(min_length=1)
    preferredLearningStyle: str | None = None
    timeAvailable: str | None = None
    languageLevel: LanguageLevel = "Beginner"
    recentScores: list[RecentScore] = Field(default_factory=list)
    targetLanguage: Language = "en"


class AdaptiveLearningGoalsOutput(ShapeModel):
    dailyGoals: list[str] = Field(min_length=3, max_length=5)
    explanation: str = Field(min_length=1)
    progress: str = Field(min_length=1)


# --- quiz for word ---


class WordRecord(ShapeModel):
    id: str = Field(min_length=1)
    javanese: str = Field(min_length=1)
    dutch: str = Field(min_length=1)
    category: str | None = None
    level: LanguageLevel | None = None
    formality: Formality | None = None
    exampleSentenceJavanese: str | None = None
    exampleSentenceDutch: str | None = None


class QuizForWordInput(ShapeModel):
    word: WordRecord
    targetQuestionType: QuestionType
    difficulty: Difficulty = "easy"
    targetLanguage: Language = "en"


class QuizForWordOutput(ShapeModel):
    quizJsonString: str = Field(min_length=2)
    feedbackMessage: str | None = None


class QuizOption(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = Field(min_length=1)
    isCorrect: bool = False


class QuizQuestion(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    questionType: QuestionType | None = None
    questionText: str = Field(min_length=1)
    options: list[QuizOption] = Field(default_factory=list)
    explanation: str | None = None
    audioUrl: str | None = None


class QuizDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    title: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    difficulty: Difficulty | None = None
    status: QuizStatus = "draft"
    questions: list[QuizQuestion] = Field(min_length=1)


# --- grammar content assist ---


class GrammarContentAssistInput(ShapeModel):
    titleEn: str | None = None
    titleNl: str | None = None
    explanationEn: str | None = None
    explanationNl: str | None = None
    category: str | None = None
    level: LanguageLevel | None = None


class GrammarContentAssistOutput(ShapeModel):
    assistedTitleEn: str = ""
    assistedTitleNl: str = ""
    assistedExplanationEn: str = ""
    assistedExplanationNl: str = ""
    feedbackMessage: str | None = None

    @field_validator(
        "assistedTitleEn",
        "assistedTitleNl",
        "assistedExplanationEn",
        "assistedExplanationNl",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


# --- pronunciation feedback ---


class PronunciationFeedbackInput(ShapeModel):
    targetWord: str = Field(min_length=1)
    audioDataUri: str = Field(pattern=AUDIO_DATA_URI_PATTERN)
    languageContext: Language = "en"


class PronunciationFeedbackOutput(ShapeModel):
    score: int = Field(ge=0, le=100)
    feedbackText: str = Field(min_length=1)
    isCorrect: bool | None = None
    phoneticComparison: str | None = None


InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


def _first_error(exc: ValidationError) -> tuple[str, str]:
    errors = exc.errors()
    if not errors:
        return "__root__", str(exc)
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "__root__"
    return field, str(first.get("msg") or "invalid value")


def _coerce_raw(raw: Any) -> Any:
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    return raw


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_generated(model: type[ModelT], raw: Any, *, raw_text: str = "") -> ModelT:
    try:
        return model.model_validate(_coerce_raw(raw))
    except ValidationError as exc:
        field, message = _first_error(exc)
        raise InvalidGenerationOutput(f"{field}:{message}", raw_text=raw_text) from exc


class FlowSchema(Generic[InputT, OutputT]):
    """Input/output shape pair of one generation flow."""

    def __init__(
        self,
        *,
        name: str,
        input_model: type[InputT],
        output_model: type[OutputT],
        hint_model: type[BaseModel] | None = None,
    ) -> None:
        self.name = name
        self.input_model = input_model
        self.output_model = output_model
        self.hint_model = hint_model or output_model

    def validate_input(self, raw: Any) -> InputT:
        if isinstance(raw, self.input_model):
            return raw
        try:
            return self.input_model.model_validate(_coerce_raw(raw))
        except ValidationError as exc:
            field, message = _first_error(exc)
            raise InputValidationError(field, message) from exc

    def validate_output(self, raw: Any, *, raw_text: str = "") -> OutputT:
        return validate_generated(self.output_model, raw, raw_text=raw_text)

    def output_hint(self) -> dict[str, Any]:
        return self.hint_model.model_json_schema()


GOALS_SCHEMA: FlowSchema[AdaptiveLearningGoalsInput, AdaptiveLearningGoalsOutput] = FlowSchema(
    name="adaptive_learning_goals",
    input_model=AdaptiveLearningGoalsInput,
    output_model=AdaptiveLearningGoalsOutput,
)
QUIZ_FOR_WORD_SCHEMA: FlowSchema[QuizForWordInput, QuizForWordOutput] = FlowSchema(
    name="quiz_for_word",
    input_model=QuizForWordInput,
    output_model=QuizForWordOutput,
    hint_model=QuizDocument,
)
GRAMMAR_ASSIST_SCHEMA: FlowSchema[GrammarContentAssistInput, GrammarContentAssistOutput] = FlowSchema(
    name="grammar_content_assist",
    input_model=GrammarContentAssistInput,
    output_model=GrammarContentAssistOutput,
)
PRONUNCIATION_SCHEMA: FlowSchema[PronunciationFeedbackInput, PronunciationFeedbackOutput] = FlowSchema(
    name="pronunciation_feedback",
    input_model=PronunciationFeedbackInput,
    output_model=PronunciationFeedbackOutput,
)
