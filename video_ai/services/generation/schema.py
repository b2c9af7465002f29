from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter, ValidationError, field_validator

from video_ai.services.generation.errors import SchemaValidationError

CONTENT_TYPES = ("quiz", "qa")

# Which array field carries the items for each content type
ITEMS_FIELD = {
    "quiz": "questions",
    "qa": "qa",
}

DEFAULT_TITLES = {
    "quiz": "Video Content Comprehension Quiz",
    "qa": "Video Content Comprehension Q&A",
}

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class _PayloadModel(BaseModel):
    # Models sometimes emit years or quantities as bare JSON numbers
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, coerce_numbers_to_str=True)


class QuizQuestion(_PayloadModel):
    question: NonEmptyStr
    options: list[NonEmptyStr] = Field(min_length=4, max_length=4)
    answer_index: int = Field(alias="answerIndex", ge=0, le=3)
    explanation: NonEmptyStr


class QAItem(_PayloadModel):
    question: NonEmptyStr
    answer: NonEmptyStr


class QuizPayload(_PayloadModel):
    type: Literal["quiz"] = "quiz"
    title: str = DEFAULT_TITLES["quiz"]
    mcq_count: int | None = Field(default=None, alias="mcqCount")
    questions: list[QuizQuestion]
    video_duration: int | None = Field(default=None, alias="videoDuration")

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, v: Any) -> Any:
        return v if isinstance(v, str) and v.strip() else DEFAULT_TITLES["quiz"]


class QAPayload(_PayloadModel):
    type: Literal["qa"] = "qa"
    title: str = DEFAULT_TITLES["qa"]
    qa_count: int | None = Field(default=None, alias="qaCount")
    qa: list[QAItem]
    video_duration: int | None = Field(default=None, alias="videoDuration")

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, v: Any) -> Any:
        return v if isinstance(v, str) and v.strip() else DEFAULT_TITLES["qa"]


GeneratedPayload = Annotated[Union[QuizPayload, QAPayload], Field(discriminator="type")]

_payload_adapter: TypeAdapter[QuizPayload | QAPayload] = TypeAdapter(GeneratedPayload)


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


def validate_payload(content_type: str, data: Any) -> QuizPayload | QAPayload:
    """
    Check a parsed model response against the payload schema for content_type.

    The model's own "type" tag is not trusted; the requested type wins.
    Raises SchemaValidationError when the items array is absent, is not a
    list, or any item breaks its per-type rules.
    """
    if content_type not in ITEMS_FIELD:
        raise ValueError(f"Unknown content type: {content_type}")
    if not isinstance(data, dict):
        raise SchemaValidationError(f"Expected a JSON object, got {type(data).__name__}")

    field = ITEMS_FIELD[content_type]
    items = data.get(field)
    if items is None:
        raise SchemaValidationError(f"Invalid {content_type} structure: missing '{field}' array")
    if not isinstance(items, list):
        raise SchemaValidationError(f"Invalid {content_type} structure: '{field}' is not an array")

    try:
        return _payload_adapter.validate_python({**data, "type": content_type})
    except ValidationError as e:
        raise SchemaValidationError(f"Invalid {content_type} item ({_first_error(e)})") from e


def load_payload(raw: str) -> QuizPayload | QAPayload:
    """Parse a stored payload. Stored rows were validated before insert."""
    return _payload_adapter.validate_json(raw)


def dump_payload(payload: QuizPayload | QAPayload) -> dict[str, Any]:
    return payload.model_dump(by_alias=True)
