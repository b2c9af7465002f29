from __future__ import annotations

from typing import Protocol


class LLM(Protocol):
    """Prompt in, raw text out. Implementations raise GenerationError on transport failure."""

    name: str

    def invoke(self, prompt: str) -> str: ...
