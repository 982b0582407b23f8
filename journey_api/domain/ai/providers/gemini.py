from typing import Any
from urllib import parse

from journey_api.domain.ai.providers.common import post_json, require_text


GEMINI_API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider:
    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_sec: int = 30,
        temperature: float = 0.3,
    ) -> None:
        if not api_key:
            raise ValueError("gemini_api_key_missing")
        self.api_key = api_key
        self.model = model
        self.timeout_sec = timeout_sec
        self.temperature = temperature

    def generate_text(self, *, prompt: str, json_mode: bool = False) -> str:
        config: dict[str, Any] = {"temperature": self.temperature}
        if json_mode:
            config["responseMimeType"] = "application/json"

        response_json = post_json(
            f"{GEMINI_API_ROOT}/{parse.quote(self.model)}:generateContent",
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": config,
            },
            headers={"x-goog-api-key": self.api_key},
            timeout_sec=self.timeout_sec,
            error_prefix="gemini",
        )
        return self._extract_text(response_json)

    @staticmethod
    def _extract_text(response_json: dict[str, Any]) -> str:
        candidates = response_json.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            feedback = response_json.get("promptFeedback") or {}
            blocked = feedback.get("blockReason") if isinstance(feedback, dict) else None
            raise RuntimeError(f"gemini_prompt_blocked:{blocked}" if blocked else "gemini_candidates_missing")

        first = candidates[0] if isinstance(candidates[0], dict) else {}
        parts = (first.get("content") or {}).get("parts", [])
        if not isinstance(parts, list):
            raise RuntimeError("gemini_parts_missing")

        # 긴 JSON은 여러 part로 쪼개져 올 수 있다
        text = "".join(
            part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        return require_text(text, "gemini_text_missing")
