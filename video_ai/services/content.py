from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from video_ai.models.generated_content import GeneratedContent
from video_ai.services.content_store import DuplicateContentError, find_content, insert_content
from video_ai.services.generation.generator import ContentGenerator
from video_ai.services.identity import fingerprint

logger = logging.getLogger(__name__)


def process_generation(
    db: Session,
    generator: ContentGenerator,
    *,
    content_type: str,
    transcript: str,
    page_title: str,
    domain: str,
    page_url: str,
    video_src: str,
    video_identifier: str | None = None,
    duration_seconds: int | None = None,
) -> tuple[GeneratedContent, bool]:
    """
    Return (artifact, cached) for a video, generating it at most once.

    - cache hit -> (row, True)
    - miss -> generate, insert -> (row, False)
    - miss but a concurrent request inserted first -> re-read -> (row, True)

    Nothing is stored unless generation fully validated.
    """
    video_identifier = video_identifier or fingerprint(domain, page_url, video_src)

    existing = find_content(db, video_identifier, content_type)
    if existing:
        logger.info("Cache hit: %s %s", content_type, video_identifier)
        return existing, True

    # Release the pooled connection before the model call; it can take minutes.
    db.commit()

    logger.info("Cache miss, generating %s for %r", content_type, page_title)
    payload = generator.generate(content_type, transcript, page_title, duration_seconds)

    try:
        row = insert_content(
            db,
            video_identifier=video_identifier,
            content_type=content_type,
            page_title=page_title,
            domain=domain,
            page_url=page_url,
            video_src=video_src,
            payload=payload,
        )
    except DuplicateContentError:
        winner = find_content(db, video_identifier, content_type)
        if winner is None:
            # constraint fired but the row is not visible; nothing sensible to return
            raise
        logger.info("Lost insert race for %s %s; returning stored content %s", content_type, video_identifier, winner.content_id)
        return winner, True

    logger.info("Content saved: %s", row.content_id)
    return row, False
