from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

MIN_ITEMS = 5

# Characters of transcript needed per item. Q&A pairs are cheaper to mine.
CHARS_PER_ITEM = {
    "quiz": 350,
    "qa": 250,
}

# (upper bound in hours, ideal item count)
_DURATION_STEPS: list[tuple[float, int]] = [
    (1.0, 10),
    (2.0, 15),
    (3.0, 20),
]
_DURATION_MAX_COUNT = 25


def duration_based_count(duration_seconds: float) -> int:
    hours = duration_seconds / 3600
    for upper, count in _DURATION_STEPS:
        if hours < upper:
            return count
    return _DURATION_MAX_COUNT


def transcript_based_count(content_type: str, transcript_length: int) -> int:
    density = CHARS_PER_ITEM.get(content_type)
    if density is None:
        raise ValueError(f"Unknown content type: {content_type}")
    return max(0, int(transcript_length)) // density


def required_count(content_type: str, duration_seconds: float | None, transcript_length: int) -> int:
    """
    How many items to ask the model for.

    Duration bounds how many distinct concepts a video can hold; transcript
    length bounds how much material there is to mine. Take the smaller, but
    never go below MIN_ITEMS. Unknown duration (None or <= 0) skips the
    duration bound entirely.
    """
    from_transcript = transcript_based_count(content_type, transcript_length)

    if duration_seconds and duration_seconds > 0:
        ideal = duration_based_count(duration_seconds)
        count = max(MIN_ITEMS, min(ideal, from_transcript))
        logger.info(
            "[%s count] duration-based=%d transcript-based=%d final=%d",
            content_type,
            ideal,
            from_transcript,
            count,
        )
        return count

    count = max(MIN_ITEMS, from_transcript)
    logger.info("[%s count] duration unknown, transcript-based=%d final=%d", content_type, from_transcript, count)
    return count
