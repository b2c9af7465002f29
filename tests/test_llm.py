import json
from dataclasses import replace
from types import SimpleNamespace

import httpx
import pytest

from video_ai.core.config import settings
from video_ai.services.generation.errors import GenerationError
from video_ai.services.llm import OllamaLLM, OpenAILLM, build_llm
from video_ai.services.llm import ollama_client


def _patch_transport(monkeypatch, handler):
    real_client = httpx.Client

    def client_with_transport(*args, **kwargs):
        return real_client(*args, transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(ollama_client.httpx, "Client", client_with_transport)


def test_ollama_invoke_posts_prompt(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": '  {"qa": []}  '})

    _patch_transport(monkeypatch, handler)

    llm = OllamaLLM("http://ollama:11434/", "qwen2.5:7b-instruct", timeout_s=5)
    assert llm.invoke("make questions") == '{"qa": []}'
    assert seen["url"] == "http://ollama:11434/api/generate"
    assert seen["body"]["prompt"] == "make questions"
    assert seen["body"]["stream"] is False


def test_ollama_http_error_is_generation_error(monkeypatch):
    _patch_transport(monkeypatch, lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(GenerationError):
        OllamaLLM("http://ollama:11434", "m").invoke("p")


def test_openai_invoke_uses_json_mode():
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=' {"questions": []} '))])

    fake_client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    llm = OpenAILLM(api_key=None, model="gpt-4o-mini", client=fake_client)

    assert llm.invoke("prompt text") == '{"questions": []}'
    assert calls[0]["response_format"] == {"type": "json_object"}
    assert calls[0]["messages"][-1] == {"role": "user", "content": "prompt text"}


def test_build_llm_selects_provider():
    assert isinstance(build_llm(replace(settings, generation_provider="ollama")), OllamaLLM)

    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        build_llm(replace(settings, generation_provider="openai", openai_api_key=None))

    with pytest.raises(ValueError, match="GENERATION_PROVIDER"):
        build_llm(replace(settings, generation_provider="gemini"))
