"""Pronunciation feedback.

There is no audio-analysis backend behind this flow. Scores are simulated:
derived from a digest of the target word and the audio reference, so the
same recording of the same word always gets the same result. The
generation backend is never called here.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any

from journey_api.services.generation.pipeline_runtime import FlowStage, run_flow
from journey_api.services.generation.schemas import (
    PRONUNCIATION_SCHEMA,
    PronunciationFeedbackInput,
    PronunciationFeedbackOutput,
)


CORRECT_THRESHOLD = 80


@dataclass(frozen=True)
class ScoringRule:
    low: int
    high: int
    tip: dict[str, str]
    phonetic: str


DEFAULT_RULE = ScoringRule(
    low=70,
    high=99,
    tip={
        "en": "Keep the vowels short and clear, and give every syllable equal weight.",
        "nl": "Houd de klinkers kort en helder en geef elke lettergreep evenveel nadruk.",
    },
    phonetic="Javanese 'a' is open like in 'father'; a final 'a' often sounds closer to 'o'.",
)

# 대소문자 무시 부분 일치, 먼저 맞는 규칙이 우선
SPECIAL_RULES: tuple[tuple[str, ScoringRule], ...] = (
    (
        "matur nuwun",
        ScoringRule(
            low=75,
            high=94,
            tip={
                "en": "Watch the 'r' sound in \"matur\": tap it once with the tip of the tongue instead of rolling it.",
                "nl": "Let op de 'r' in \"matur\": tik hem één keer met de tongpunt in plaats van hem te rollen.",
            },
            phonetic="ma-TUR nu-WUN: a single tapped 'r', and 'u' as the 'oe' in Dutch 'boek'.",
        ),
    ),
    (
        "sugeng",
        ScoringRule(
            low=78,
            high=96,
            tip={
                "en": "End \"sugeng\" on a soft 'ng' sound without releasing a 'g'.",
                "nl": "Eindig \"sugeng\" op een zachte 'ng'-klank zonder een 'g' uit te spreken.",
            },
            phonetic="su-GENG: the final 'ng' is nasal, as in English 'sing'.",
        ),
    ),
)

OPENINGS = {
    "en": (
        (90, "Excellent! Your pronunciation of \"{word}\" sounds very natural."),
        (80, "Well done with \"{word}\". It is clear and easy to understand."),
        (0, "Good attempt at \"{word}\". There is still some room for improvement."),
    ),
    "nl": (
        (90, "Uitstekend! Je uitspraak van \"{word}\" klinkt heel natuurlijk."),
        (80, "Goed gedaan met \"{word}\". Het is duidelijk en goed te verstaan."),
        (0, "Goede poging bij \"{word}\". Er is nog wat ruimte voor verbetering."),
    ),
}


def select_rule(target_word: str) -> ScoringRule:
    lowered = target_word.casefold()
    for needle, rule in SPECIAL_RULES:
        if needle in lowered:
            return rule
    return DEFAULT_RULE


def simulate_score(target_word: str, audio_data_uri: str, rule: ScoringRule) -> int:
    digest = hashlib.sha256(f"{target_word.strip().casefold()}\n{audio_data_uri}".encode("utf-8")).digest()
    roll = int.from_bytes(digest[:8], "big")
    return rule.low + roll % (rule.high - rule.low + 1)


def build_feedback_text(target_word: str, score: int, language: str, rule: ScoringRule) -> str:
    opening = next(text for floor, text in OPENINGS[language] if score >= floor)
    return f"{opening.format(word=target_word)} {rule.tip[language]} Score: {score}/100."


async def get_pronunciation_feedback(
    payload: PronunciationFeedbackInput | dict[str, Any],
    *,
    trace: list[FlowStage] | None = None,
) -> PronunciationFeedbackOutput:
    async def simulate(request: PronunciationFeedbackInput) -> PronunciationFeedbackOutput:
        rule = select_rule(request.targetWord)
        score = simulate_score(request.targetWord, request.audioDataUri, rule)
        return PRONUNCIATION_SCHEMA.validate_output(
            {
                "score": score,
                "feedbackText": build_feedback_text(request.targetWord, score, request.languageContext, rule),
                "isCorrect": score >= CORRECT_THRESHOLD,
                "phoneticComparison": rule.phonetic,
            }
        )

    return await run_flow(schema=PRONUNCIATION_SCHEMA, payload=payload, generate=simulate, trace=trace)
