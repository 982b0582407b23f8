import re
from typing import Any


def normalize_option_text(value: Any) -> str:
    text = str(value or "").strip()
    if not text:
        return ""

    labeled = re.match(r"^(?:option|optie|antwoord|answer)\s*[0-9A-Da-d]+(?:\s*[:.)-]\s*|\s+)(.+)$", text, re.IGNORECASE)
    if labeled:
        return str(labeled.group(1)).strip()

    numbered = re.match(r"^\s*(?:\(?[1-9]\)?[.)-]|\(?[A-Da-d][.)])\s*(.+)$", text)
    if numbered:
        return str(numbered.group(1)).strip()

    return text


def is_placeholder_option(text: str) -> bool:
    lowered = str(text or "").strip().lower()
    if not lowered:
        return True
    if re.fullmatch(r"\d+", lowered):
        return True
    if re.fullmatch(r"[a-d]", lowered):
        return True
    if re.fullmatch(r"\[.*\]", lowered):
        return True
    if re.fullmatch(r"(?:option|optie|antwoord|answer)\s*[0-9a-d]+", lowered, re.IGNORECASE):
        return True
    return False


def normalize_quiz_options(options: Any) -> list[dict[str, Any]]:
    """Strip labels, drop placeholders and duplicates; a duplicate keeps the correct flag."""
    if not isinstance(options, list):
        return []

    normalized: list[dict[str, Any]] = []
    positions: dict[str, int] = {}
    for option in options:
        if isinstance(option, dict):
            raw_text, is_correct = option.get("text"), bool(option.get("isCorrect"))
        else:
            raw_text, is_correct = option, False
        text = normalize_option_text(raw_text)
        if is_placeholder_option(text):
            continue
        key = text.casefold()
        if key in positions:
            if is_correct:
                normalized[positions[key]]["isCorrect"] = True
            continue
        positions[key] = len(normalized)
        normalized.append({"text": text, "isCorrect": is_correct})
    return normalized
