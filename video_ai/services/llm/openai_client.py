from __future__ import annotations

from typing import Any

from video_ai.services.generation.errors import GenerationError

SYSTEM_PROMPT = """You are an expert learning designer and instructional writer.
You write comprehension questions grounded strictly in the supplied transcript.
Output MUST be valid JSON only. No markdown, no commentary."""


class OpenAILLM:
    """Chat Completions in JSON mode. The SDK handles its own retries on transient errors."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        timeout_s: float = 120.0,
        max_retries: int = 2,
        temperature: float = 0.4,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.name = f"openai:{model}"
        self._client = client or self._build_client(api_key, timeout_s, max_retries)

    @staticmethod
    def _build_client(api_key: str | None, timeout_s: float, max_retries: int):
        if not api_key:
            raise ValueError("OPENAI_API_KEY is missing")

        # OpenAI SDK v1+
        from openai import OpenAI

        return OpenAI(api_key=api_key, timeout=timeout_s, max_retries=max_retries)

    def invoke(self, prompt: str) -> str:
        from openai import OpenAIError

        try:
            chat = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise GenerationError(f"OpenAI request failed: {e}") from e

        return (chat.choices[0].message.content or "").strip()
