from __future__ import annotations

from video_ai.services.generation.schema import DEFAULT_TITLES

# ----------------------------
# Shared rule blocks
# ----------------------------

CONTENT_RULES = """Source rules (strict):
- Use ONLY what is actually delivered in the content:
  - spoken explanations
  - concepts taught
  - examples, analogies, demonstrations
  - warnings, common mistakes, best practices
  - conclusions and key insights
- NEVER use or reference:
  - the title
  - upload date, duration, views, likes, comments
  - channel name or creator identity
  - description, tags, thumbnails, SEO text or any other platform metadata
- A question that can be answered WITHOUT the content is invalid and must be rewritten."""

SELF_CHECK = """Final check, for EACH item before you output it:
"Could someone answer this without the source content?"
- yes -> rewrite it so it needs the content
- no  -> keep it
Then confirm the item count is EXACTLY {count}."""

NO_REFUSAL = """Always produce the requested items from whatever content is available.
Even if the content seems limited, extract what IS there.
Do NOT answer with an error message or explanation instead of JSON."""

# ----------------------------
# Quiz
# ----------------------------

QUIZ_RULES = """Question design:
- Prefer WHY / HOW / APPLICATION questions over recall
- Cover concepts, cause and effect, comparisons the speaker makes, scenarios discussed,
  and misconceptions the content addresses
- Each question has exactly 4 plausible options and exactly one correct option
- answerIndex is 0-based (0..3) and MUST point to the correct option
- explanation is 1-2 lines and refers to what the content actually said

Good patterns:
- "According to the speaker, why is [concept] important?"
- "Which approach was recommended for solving [problem]?"
- "What common mistake did the instructor warn against?"
- "How did the speaker differentiate between [X] and [Y]?"
- "What analogy was used to explain [concept]?"

Bad patterns (never generate):
- "What is the title of this video?"
- "How long is the video?"
- "Who uploaded this video?"
- "When was the video published?"
- "How many views does the video have?\""""

QUIZ_SCHEMA = """{{
  "type": "quiz",
  "title": "{title}",
  "mcqCount": {count},
  "questions": [
    {{
      "question": "...",
      "options": ["...", "...", "...", "..."],
      "answerIndex": 0,
      "explanation": "..."
    }}
  ]
}}"""

# ----------------------------
# Q&A
# ----------------------------

QA_RULES = """Question design:
- Open-ended questions only; multiple-choice is NOT allowed
- Questions test understanding of the content, not trivia
- Answers are derived ONLY from what the speaker says; clear, concise, explanatory (1-3 sentences)

Good patterns:
- "Why does the speaker recommend this approach?"
- "What problem does this technique solve according to the content?"
- "What mistake does the speaker warn beginners about?"
- "What happens if the suggested step is skipped, as explained?"

Bad patterns (never generate):
- "What is the title of the video?"
- "Who uploaded this video?"
- "How many views does it have?"
- "What is the channel name?\""""

QA_SCHEMA = """{{
  "type": "qa",
  "title": "{title}",
  "qaCount": {count},
  "qa": [
    {{"question": "...", "answer": "..."}}
  ]
}}"""

PRIMARY_TEMPLATE = """You are an expert learning designer generating {kind} strictly from the ACTUAL CONTENT of a video.

{content_rules}

Item count (mandatory):
Video duration: {duration}
Generate EXACTLY {count} {unit}. Not more, not fewer.

{type_rules}

Content title (reference only, do NOT ask about it): {page_title}

Transcript:
{transcript}

{self_check}

{no_refusal}

Return ONLY a JSON object (no markdown, no code fences, no commentary) with this exact shape:
{schema}
"""

FALLBACK_TEMPLATE = """Generate {count} {unit} based on this content.

Title: {page_title}
Content:
{transcript}

{instruction}
Return ONLY a JSON object with this structure:
{schema}
"""

_SPECS = {
    "quiz": {
        "kind": "multiple-choice quiz questions",
        "unit": "multiple-choice questions",
        "rules": QUIZ_RULES,
        "schema": QUIZ_SCHEMA,
        "fallback_instruction": "Create content-based questions with exactly 4 options each and the 0-based index of the correct option.",
    },
    "qa": {
        "kind": "open-ended questions and answers",
        "unit": "question-answer pairs",
        "rules": QA_RULES,
        "schema": QA_SCHEMA,
        "fallback_instruction": "Create open-ended questions that can be answered from the content above, each with its answer.",
    },
}


def _parts_for(content_type: str) -> dict[str, str]:
    try:
        return _SPECS[content_type]
    except KeyError:
        raise ValueError(f"Unknown content type: {content_type}") from None


def _duration_text(duration_seconds: float | None) -> str:
    if not duration_seconds or duration_seconds <= 0:
        return "unknown"
    return f"{duration_seconds / 3600:.2f} hours ({int(duration_seconds)} seconds)"


def build_prompt(
    content_type: str,
    required_count: int,
    page_title: str,
    transcript: str,
    duration_seconds: float | None = None,
) -> str:
    s = _parts_for(content_type)
    return PRIMARY_TEMPLATE.format(
        kind=s["kind"],
        unit=s["unit"],
        count=required_count,
        duration=_duration_text(duration_seconds),
        content_rules=CONTENT_RULES,
        type_rules=s["rules"],
        page_title=page_title,
        transcript=transcript,
        self_check=SELF_CHECK.format(count=required_count),
        no_refusal=NO_REFUSAL,
        schema=s["schema"].format(title=DEFAULT_TITLES[content_type], count=required_count),
    )


def build_fallback_prompt(
    content_type: str,
    required_count: int,
    page_title: str,
    transcript: str,
) -> str:
    """
    Relaxed prompt for the single retry: no forbidden-pattern list, no
    self-check, just N items from the content in the same JSON shape.
    """
    s = _parts_for(content_type)
    return FALLBACK_TEMPLATE.format(
        count=required_count,
        unit=s["unit"],
        page_title=page_title,
        transcript=transcript,
        instruction=s["fallback_instruction"],
        schema=s["schema"].format(title=DEFAULT_TITLES[content_type], count=required_count),
    )
