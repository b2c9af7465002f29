from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from video_ai.core.config import settings
from video_ai.models.generated_content import GeneratedContent
from video_ai.services.generation.schema import (
    QAPayload,
    QuizPayload,
    dump_payload,
    load_payload,
)


class ContentNotFoundError(Exception):
    pass


class DuplicateContentError(Exception):
    """(video_identifier, content_type) already has a stored artifact."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


# ----------------------------
# Reads
# ----------------------------

def find_content(db: Session, video_identifier: str, content_type: str) -> GeneratedContent | None:
    return db.execute(
        select(GeneratedContent).where(
            GeneratedContent.video_identifier == video_identifier,
            GeneratedContent.content_type == content_type,
        )
    ).scalar_one_or_none()


def get_content(db: Session, content_id: str) -> GeneratedContent:
    row = db.execute(
        select(GeneratedContent).where(GeneratedContent.content_id == content_id)
    ).scalar_one_or_none()
    if not row:
        raise ContentNotFoundError("Content not found")
    return row


def count_content(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(GeneratedContent)).scalar_one())


def payload_of(row: GeneratedContent) -> QuizPayload | QAPayload:
    return load_payload(row.generated_json)


# ----------------------------
# Write
# ----------------------------

def insert_content(
    db: Session,
    *,
    video_identifier: str,
    content_type: str,
    page_title: str,
    domain: str,
    page_url: str,
    video_src: str,
    payload: QuizPayload | QAPayload,
) -> GeneratedContent:
    """
    Store a freshly generated artifact.

    Uniqueness of (video_identifier, content_type) is left to the database
    constraint; a losing concurrent insert surfaces as DuplicateContentError
    with the session rolled back.
    """
    row = GeneratedContent(
        content_id=str(uuid.uuid4()),
        video_identifier=video_identifier,
        content_type=content_type,
        page_title=page_title,
        domain=domain,
        page_url=page_url,
        video_src=video_src,
        generated_json=json.dumps(dump_payload(payload), ensure_ascii=False),
        created_at=_now(),
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateContentError(
            f"{content_type} content already exists for video {video_identifier}"
        ) from e
    db.refresh(row)
    return row


# ----------------------------
# Views
# ----------------------------

def content_to_dict(row: GeneratedContent) -> dict[str, Any]:
    return {
        "contentId": row.content_id,
        "videoIdentifier": row.video_identifier,
        "pageTitle": row.page_title,
        "domain": row.domain,
        "pageUrl": row.page_url,
        "videoSrc": row.video_src,
        "contentType": row.content_type,
        "generatedData": dump_payload(payload_of(row)),
        "createdAt": _iso(row.created_at),
    }


def list_history(
    db: Session,
    content_type: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """
    Newest first summaries. Never includes the generated payload.
    """
    limit = limit if limit is not None else settings.history_limit

    query = select(GeneratedContent)
    if content_type:
        query = query.where(GeneratedContent.content_type == content_type)
    query = query.order_by(GeneratedContent.created_at.desc(), GeneratedContent.id.desc()).limit(limit)

    return [
        {
            "contentId": r.content_id,
            "videoIdentifier": r.video_identifier,
            "pageTitle": r.page_title,
            "domain": r.domain,
            "contentType": r.content_type,
            "createdAt": _iso(r.created_at),
        }
        for r in db.execute(query).scalars()
    ]


def redact_payload(payload: QuizPayload | QAPayload) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """
    Split a payload into (questions without answers, answers aligned by index).
    """
    data = dump_payload(payload)

    if isinstance(payload, QuizPayload):
        data["questions"] = [
            {"question": q.question, "options": list(q.options)} for q in payload.questions
        ]
        answers = [
            {"answerIndex": q.answer_index, "explanation": q.explanation} for q in payload.questions
        ]
        return data, answers

    data["qa"] = [{"question": it.question} for it in payload.qa]
    answers = [{"answer": it.answer} for it in payload.qa]
    return data, answers


def get_redacted(db: Session, content_id: str) -> dict[str, Any]:
    """
    Artifact for interactive clients: render questions first, reveal answers later.
    """
    row = get_content(db, content_id)
    out = content_to_dict(row)
    out["generatedData"], out["answers"] = redact_payload(payload_of(row))
    return out
