from typing import Any, Mapping, Sequence

from fastapi import HTTPException

from journey_api.services.generation.errors import (
    GenerationBackendError,
    GenerationError,
    InputValidationError,
    InvalidGenerationOutput,
)


KNOWN_ERROR_CODES = {
    "invalid_input",
    "invalid_output",
    "rate_limited",
    "timeout",
    "config_error",
    "provider_error",
    "unknown",
}

# 파이프라인은 재시도하지 않는다. 클라이언트 판단용 힌트일 뿐이다.
RETRYABLE_ERROR_CODES = {
    "invalid_output",
    "rate_limited",
    "timeout",
}

STATUS_BY_ERROR_CODE = {
    "invalid_input": 422,
    "invalid_output": 422,
    "rate_limited": 429,
    "timeout": 504,
    "config_error": 503,
    "provider_error": 502,
    "unknown": 500,
}

_DEFAULT_MESSAGES = {
    "invalid_input": "Request does not match the expected input",
    "invalid_output": "Generated output did not match the expected schema",
    "rate_limited": "Generation backend rate limited the request",
    "timeout": "Generation request timed out",
    "config_error": "Generation backend is unavailable",
    "provider_error": "Generation backend request failed",
    "unknown": "Request failed",
}


def normalize_error_code(value: Any) -> str:
    raw = str(value or "").strip().lower()
    if raw in KNOWN_ERROR_CODES:
        return raw
    return "unknown"


def _build_message(code: str, reason: str) -> str:
    message = " ".join(str(reason or "").split()).strip()
    if message:
        return message[:260]
    return _DEFAULT_MESSAGES.get(code, "Request failed")


def build_structured_error_detail(
    *,
    error_code: str,
    message: str | None = None,
    retryable: bool | None = None,
    detail: Any = None,
) -> dict[str, Any]:
    code = normalize_error_code(error_code)
    message_text = _build_message(code, message or str(detail or ""))
    if retryable is None:
        retryable = code in RETRYABLE_ERROR_CODES

    detail_text = " ".join(str(detail or "").split()).strip() or message_text

    return {
        "error_code": code,
        "message": message_text,
        "retryable": bool(retryable),
        "detail": detail_text,
    }


def input_error_from_request_errors(errors: Sequence[Mapping[str, Any]]) -> InputValidationError:
    # FastAPI 검증 오류의 loc 앞에는 "body" 가 붙는다
    first = errors[0] if errors else {}
    loc = list(first.get("loc", ()))
    if loc and loc[0] == "body":
        loc = loc[1:]
    parts = [str(part) for part in loc]
    return InputValidationError(".".join(parts) or "__root__", str(first.get("msg") or "invalid value"))


def http_exception_for(error: GenerationError, *, pipeline: str) -> HTTPException:
    code = normalize_error_code(error.error_code)
    if isinstance(error, InputValidationError):
        message = f"{error.field}: {error.message}"
    elif isinstance(error, GenerationBackendError):
        message = error.reason
    elif isinstance(error, InvalidGenerationOutput):
        message = error.reason
    else:
        message = str(error)

    return HTTPException(
        status_code=STATUS_BY_ERROR_CODE[code],
        detail=build_structured_error_detail(
            error_code=code,
            message=message,
            detail=f"{pipeline}_failed:{code}:{_build_message(code, message)}",
        ),
    )


def build_http_error_payload(exc: HTTPException, trace_id: str) -> dict[str, Any]:
    detail = exc.detail

    if isinstance(detail, dict):
        code = normalize_error_code(detail.get("error_code"))
        message = _build_message(code, detail.get("message") or detail.get("detail") or "")
        retryable = bool(detail.get("retryable")) if "retryable" in detail else code in RETRYABLE_ERROR_CODES
        legacy_detail = str(detail.get("detail") or "").strip() or message
    else:
        text = " ".join(str(detail or "").split()).strip()
        code = normalize_error_code(text.split(":", 1)[0]) if text else "unknown"
        message = _build_message(code, text)
        retryable = code in RETRYABLE_ERROR_CODES
        legacy_detail = text or message

    return {
        "error_code": code,
        "message": message,
        "retryable": retryable,
        "trace_id": trace_id,
        "detail": legacy_detail,
    }


def build_unexpected_error_payload(trace_id: str) -> dict[str, Any]:
    return {
        "error_code": "unknown",
        "message": "Unexpected server error",
        "retryable": False,
        "trace_id": trace_id,
        "detail": "unexpected_server_error",
    }
