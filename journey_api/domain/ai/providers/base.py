from typing import Protocol


class TextGenerationProvider(Protocol):
    """Blocking LLM provider contract that returns the model's raw text."""

    def generate_text(
        self,
        *,
        prompt: str,
        json_mode: bool = False,
    ) -> str:
        ...
