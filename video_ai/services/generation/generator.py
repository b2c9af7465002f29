from __future__ import annotations

import enum
import json
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from video_ai.core.config import Settings, settings as default_settings
from video_ai.services.generation.errors import (
    InsufficientContentError,
    MalformedResponseError,
    SchemaValidationError,
)
from video_ai.services.generation.policy import required_count
from video_ai.services.generation.prompts import build_fallback_prompt, build_prompt
from video_ai.services.generation.schema import (
    ITEMS_FIELD,
    QAPayload,
    QuizPayload,
    validate_payload,
)

if TYPE_CHECKING:
    from video_ai.services.llm.base import LLM

logger = logging.getLogger(__name__)

COUNT_FIELD = {
    "quiz": "mcqCount",
    "qa": "qaCount",
}

MIN_RESPONSE_CHARS = 50

# Lowercased phrases that mark a refusal instead of a payload
REFUSAL_MARKERS = (
    "insufficient video content",
    "insufficient content",
    "cannot generate",
    "can't generate",
    "unable to generate",
)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?")


# ----------------------------
# Response cleanup
# ----------------------------

def strip_fences(text: str) -> str:
    """Remove ```json / ``` wrappers the model adds despite being told not to."""
    return _FENCE_RE.sub("", text or "").strip()


def soft_failure_reason(text: str) -> str | None:
    """
    Why a cleaned response is unusable, or None if it is worth parsing.
    """
    if len(text) < MIN_RESPONSE_CHARS:
        return "too_short"
    if not text.startswith("{"):
        return "not_json_object"
    lowered = text.lower()
    if any(m in lowered for m in REFUSAL_MARKERS):
        return "refusal"
    return None


def parse_json_object(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Model returned invalid JSON ({e.msg} at pos {e.pos})") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Model returned JSON {type(data).__name__}, expected an object")
    return data


# ----------------------------
# Attempt state machine
# ----------------------------

class AttemptState(str, enum.Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"
    FAILED = "failed"
    DONE = "done"


@dataclass
class GenerationTrace:
    """What happened during one generate() call; useful in logs and tests."""
    states: list[AttemptState] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def calls(self) -> int:
        return sum(1 for s in self.states if s in (AttemptState.PRIMARY, AttemptState.FALLBACK))


class ContentGenerator:
    """
    Turns a transcript into a validated quiz / Q&A payload using one LLM.

    At most two model calls per request: the primary prompt, then (only if the
    primary response is unusable) one relaxed fallback prompt.
    """

    def __init__(self, llm: LLM, settings: Settings | None = None) -> None:
        self.llm = llm
        self.settings = settings or default_settings
        self.last_trace: GenerationTrace | None = None

    def generate(
        self,
        content_type: str,
        transcript: str,
        page_title: str,
        duration_seconds: int | None = None,
    ) -> QuizPayload | QAPayload:
        if content_type not in ITEMS_FIELD:
            raise ValueError(f"Unknown content type: {content_type}")

        transcript = transcript or ""
        min_chars = self.settings.min_transcript_chars
        if len(transcript) < min_chars:
            raise InsufficientContentError(
                f"Transcript is too short or empty. Need at least {min_chars} characters to generate {content_type}."
            )

        count = required_count(content_type, duration_seconds, len(transcript))
        logger.info(
            "[%s generation] provider=%s duration=%s required=%d transcript_chars=%d title=%r",
            content_type,
            getattr(self.llm, "name", type(self.llm).__name__),
            f"{duration_seconds}s" if duration_seconds else "unknown",
            count,
            len(transcript),
            page_title,
        )

        trace = GenerationTrace()
        self.last_trace = trace

        state = AttemptState.PRIMARY
        last_error: MalformedResponseError | SchemaValidationError | None = None
        payload: QuizPayload | QAPayload | None = None

        while state in (AttemptState.PRIMARY, AttemptState.FALLBACK):
            trace.states.append(state)
            if state is AttemptState.PRIMARY:
                prompt = build_prompt(content_type, count, page_title, transcript, duration_seconds)
            else:
                prompt = build_fallback_prompt(content_type, count, page_title, transcript)

            raw = self.llm.invoke(prompt)
            text = strip_fences(raw)
            logger.debug("[%s generation] %s response length=%d", content_type, state.value, len(text))

            try:
                payload = self._evaluate(state, content_type, text, count, duration_seconds)
                state = AttemptState.DONE
            except (MalformedResponseError, SchemaValidationError) as e:
                last_error = e
                trace.failures.append(str(e))
                if state is AttemptState.PRIMARY:
                    logger.warning(
                        "[%s generation] primary response unusable (%s); retrying with relaxed prompt. Preview: %r",
                        content_type,
                        e,
                        text[:200],
                    )
                    state = AttemptState.FALLBACK
                else:
                    state = AttemptState.FAILED

        trace.states.append(state)
        if payload is None:
            logger.error("[%s generation] fallback response unusable: %s", content_type, last_error)
            raise last_error

        items = getattr(payload, ITEMS_FIELD[content_type])
        if not items:
            logger.warning(
                "[%s generation] model returned zero items (expected %d); storing an empty %s",
                content_type,
                count,
                content_type,
            )
        elif len(items) != count:
            logger.warning(
                "[%s generation] expected %d items but received %d",
                content_type,
                count,
                len(items),
            )
        logger.info("[%s generation] generated %d items in %d call(s)", content_type, len(items), trace.calls)
        return payload

    def _evaluate(
        self,
        state: AttemptState,
        content_type: str,
        text: str,
        count: int,
        duration_seconds: int | None,
    ) -> QuizPayload | QAPayload:
        # The fallback response is parsed as-is; only the primary one gets the soft checks.
        if state is AttemptState.PRIMARY:
            reason = soft_failure_reason(text)
            if reason:
                raise MalformedResponseError(f"Unusable model response ({reason})")

        data = parse_json_object(text)
        # Count metadata reflects the requested count, not what came back.
        data[COUNT_FIELD[content_type]] = count
        data["videoDuration"] = duration_seconds
        return validate_payload(content_type, data)
