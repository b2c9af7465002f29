from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from video_ai.services.generation.errors import GenerationError


class OllamaLLM:
    """
    Minimal Ollama client for local generation.

    Uses /api/generate (simple, non-streaming) to keep integration stable.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout_s: float = 120.0,
        temperature: float = 0.4,
        system: Optional[str] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout_s = timeout_s
        self.temperature = temperature
        self.system = system
        self.name = f"ollama:{model}"

    def invoke(self, prompt: str) -> str:
        url = f"{self.base_url}/api/generate"

        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            # ask Ollama to constrain output to JSON
            "format": "json",
            "options": {
                "temperature": self.temperature,
            },
        }
        if self.system:
            payload["system"] = self.system

        timeout = httpx.Timeout(self.timeout_s, connect=10.0)
        try:
            with httpx.Client(timeout=timeout) as client:
                r = client.post(url, json=payload)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            raise GenerationError(f"Ollama request failed: {e}") from e

        # Ollama returns {"response": "...", ...}
        return (data.get("response") or "").strip()
