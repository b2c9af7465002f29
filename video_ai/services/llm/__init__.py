from __future__ import annotations

from video_ai.core.config import Settings
from video_ai.services.llm.base import LLM
from video_ai.services.llm.ollama_client import OllamaLLM
from video_ai.services.llm.openai_client import OpenAILLM


def build_llm(settings: Settings) -> LLM:
    provider = settings.generation_provider

    if provider == "openai":
        return OpenAILLM(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_s=settings.llm_timeout_sec,
            max_retries=settings.openai_max_retries,
            temperature=settings.llm_temperature,
        )
    if provider == "ollama":
        return OllamaLLM(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout_s=settings.llm_timeout_sec,
            temperature=settings.llm_temperature,
        )

    raise ValueError(f"Unknown GENERATION_PROVIDER: {provider!r} (use openai or ollama)")


__all__ = ["LLM", "OllamaLLM", "OpenAILLM", "build_llm"]
