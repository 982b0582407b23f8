from __future__ import annotations

import json
import logging
from typing import Any

from journey_api.domain.ai.providers.common import strip_code_fence
from journey_api.services.generation.errors import InvalidGenerationOutput
from journey_api.services.generation.schemas import FlowSchema, OutputT


logger = logging.getLogger(__name__)

CANONICAL_INDENT = 2
_EXCERPT_LIMIT = 200


def canonicalize(value: Any) -> str:
    """Serialize a parsed JSON value into its one stable textual form."""
    return json.dumps(
        value,
        ensure_ascii=False,
        sort_keys=True,
        indent=CANONICAL_INDENT,
        allow_nan=False,
    )


def excerpt(raw_text: str) -> str:
    compact = " ".join(str(raw_text or "").split())
    if len(compact) <= _EXCERPT_LIMIT:
        return compact
    return compact[: _EXCERPT_LIMIT - 3] + "..."


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non_json_constant:{token}")


def parse_json_document(raw_text: str) -> Any:
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise InvalidGenerationOutput("empty_output", raw_text=str(raw_text or ""))
    cleaned = strip_code_fence(raw_text)
    try:
        return json.loads(cleaned, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        logger.warning("Generated text is not valid JSON: %s", excerpt(raw_text))
        raise InvalidGenerationOutput(f"json_parse_failed:{exc}", raw_text=raw_text) from exc


def parse_json_object(raw_text: str) -> dict[str, Any]:
    parsed = parse_json_document(raw_text)
    if not isinstance(parsed, dict):
        raise InvalidGenerationOutput("ai_response_not_object", raw_text=raw_text)
    return parsed


def validate_structured_text(raw_text: str, schema: FlowSchema[Any, OutputT]) -> OutputT:
    parsed = parse_json_object(raw_text)
    try:
        return schema.validate_output(parsed, raw_text=raw_text)
    except InvalidGenerationOutput as exc:
        logger.warning("%s output failed validation (%s): %s", schema.name, exc.reason, excerpt(raw_text))
        raise
