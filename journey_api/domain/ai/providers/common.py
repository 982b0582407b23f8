import json
from typing import Any
from urllib import error, request


def strip_code_fence(text: str) -> str:
    raw = text.strip()
    if raw.startswith("```"):
        lines = raw.splitlines()
        if len(lines) >= 2 and lines[-1].strip().startswith("```"):
            return "\n".join(lines[1:-1]).strip()
    return raw


def require_text(value: object, error_code: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    raise RuntimeError(error_code)


def post_json(
    endpoint: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str],
    timeout_sec: int,
    error_prefix: str,
) -> dict[str, Any]:
    req = request.Request(
        endpoint,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json", **headers},
        method="POST",
    )

    try:
        with request.urlopen(req, timeout=timeout_sec) as response:
            body = response.read().decode("utf-8")
    except error.HTTPError as exc:  # pragma: no cover - network boundary
        # 상태 코드를 메시지에 남겨야 rate limit / 인증 오류를 구분할 수 있다
        reason = exc.read().decode("utf-8", errors="replace")[:300]
        raise RuntimeError(f"{error_prefix}_request_failed:{exc.code}:{reason}") from exc
    except Exception as exc:  # pragma: no cover - network boundary
        raise RuntimeError(f"{error_prefix}_request_failed:{exc}") from exc

    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"{error_prefix}_response_not_json") from exc
    if not isinstance(parsed, dict):
        raise RuntimeError(f"{error_prefix}_response_not_object")
    return parsed
