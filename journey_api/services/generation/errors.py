from __future__ import annotations


class GenerationError(RuntimeError):
    """Base class for every failure a generation flow can surface."""

    error_code = "unknown"


class InputValidationError(GenerationError):
    """The caller's request does not match the flow's input shape."""

    error_code = "invalid_input"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"invalid_input:{field}:{message}")


class PreconditionUnmet(GenerationError):
    """A flow-specific requirement is missing; resolved into a fallback artifact."""

    error_code = "precondition_unmet"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"precondition_unmet:{reason}")


class GenerationBackendError(GenerationError):
    """The generative backend was unreachable, unconfigured, or returned an error."""

    def __init__(self, reason: str, *, kind: str = "provider_error") -> None:
        self.reason = reason
        self.kind = kind
        super().__init__(f"generation_backend_failed:{kind}:{reason}")

    @property
    def error_code(self) -> str:  # type: ignore[override]
        return self.kind


class InvalidGenerationOutput(GenerationError):
    """The backend answered, but the answer failed parsing or validation."""

    error_code = "invalid_output"

    def __init__(self, reason: str, *, raw_text: str = "") -> None:
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(f"invalid_output:{reason}")


def classify_backend_failure(detail: str) -> str:
    text = str(detail or "").lower()

    rate_limit_tokens = (
        "429",
        "too many requests",
        "rate limit",
        "rate_limit",
        "resource exhausted",
        "resource_exhausted",
        "quota",
    )
    timeout_tokens = (
        "timed out",
        "timeout",
        "deadline exceeded",
    )
    config_tokens = (
        "api_key_missing",
        "openai_base_url_missing",
        "unsupported_ai_provider",
        "generation_backend_unavailable",
        "401",
        "403",
    )

    if any(token in text for token in rate_limit_tokens):
        return "rate_limited"
    if any(token in text for token in timeout_tokens):
        return "timeout"
    if any(token in text for token in config_tokens):
        return "config_error"
    return "provider_error"
