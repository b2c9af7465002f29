import os
import tempfile
from pathlib import Path

# Must be set before video_ai is imported: Settings reads the env at import time.
_DB_DIR = tempfile.mkdtemp(prefix="video_ai_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'test.db'}"
os.environ["ENV"] = "test"
os.environ["GENERATION_PROVIDER"] = "ollama"

import json  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from video_ai.api.content import get_generator  # noqa: E402
from video_ai.db.base import Base  # noqa: E402
from video_ai.db.session import SessionLocal, engine  # noqa: E402
from video_ai.main import app  # noqa: E402
from video_ai.services.generation.generator import ContentGenerator  # noqa: E402

TRANSCRIPT = (
    "In this lesson the speaker explains why database indexes speed up reads but slow down writes. "
    "She compares a B-tree index to the index at the back of a book, and warns that adding an index "
    "to every column is a common beginner mistake because each insert must update every index. "
) * 20


class FakeLLM:
    """Scripted LLM: returns queued responses in order and records prompts."""

    name = "fake"

    def __init__(self, responses=None, on_invoke=None):
        self.responses = list(responses or [])
        self.prompts: list[str] = []
        self.on_invoke = on_invoke

    def invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.on_invoke:
            self.on_invoke(len(self.prompts))
        if not self.responses:
            raise AssertionError("FakeLLM called more times than scripted")
        return self.responses.pop(0)


def quiz_json(n: int = 3, answers=None, **extra) -> str:
    answers = answers or [i % 4 for i in range(n)]
    return json.dumps(
        {
            "type": "quiz",
            "title": "Indexes Quiz",
            "questions": [
                {
                    "question": f"According to the speaker, what is trade-off #{i + 1} of indexes?",
                    "options": ["Faster reads", "Slower writes", "Both", "Neither"],
                    "answerIndex": answers[i],
                    "explanation": "The speaker says indexes speed reads but every insert updates them.",
                }
                for i in range(n)
            ],
            **extra,
        }
    )


def qa_json(n: int = 3) -> str:
    return json.dumps(
        {
            "type": "qa",
            "title": "Indexes Q&A",
            "qa": [
                {
                    "question": f"Why does the speaker warn against indexing every column? ({i + 1})",
                    "answer": "Because each insert must update every index, which slows writes.",
                }
                for i in range(n)
            ],
        }
    )


@pytest.fixture(autouse=True)
def _fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def generator(fake_llm):
    return ContentGenerator(fake_llm)


@pytest.fixture
def client(generator):
    app.dependency_overrides[get_generator] = lambda: generator
    return TestClient(app)
