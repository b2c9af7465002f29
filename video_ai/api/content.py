from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from video_ai.core.config import settings
from video_ai.db.session import get_db
from video_ai.services.answers import validate_answers
from video_ai.services.content import process_generation
from video_ai.services.content_store import ContentNotFoundError, content_to_dict, get_redacted, list_history
from video_ai.services.generation.errors import GenerationError, InsufficientContentError
from video_ai.services.generation.generator import ContentGenerator
from video_ai.services.llm import build_llm

router = APIRouter(prefix="/api", tags=["content"])


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    # computed from domain|pageUrl|videoSrc when omitted
    video_identifier: str | None = Field(default=None, alias="videoIdentifier", max_length=128)
    page_title: str = Field(alias="pageTitle", min_length=1, max_length=500)
    domain: str = Field(min_length=1)
    page_url: str = Field(alias="pageUrl", min_length=1)
    video_src: str = Field(alias="videoSrc", min_length=1)
    content_type: Literal["quiz", "qa"] = Field(alias="contentType")
    transcript: str = Field(min_length=1, max_length=50_000)
    video_duration: int | None = Field(default=None, alias="videoDuration", ge=1)


class ValidateAnswersRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_answers: dict[str, Any] = Field(alias="userAnswers")


@lru_cache(maxsize=1)
def _default_generator() -> ContentGenerator:
    return ContentGenerator(build_llm(settings), settings)


def get_generator() -> ContentGenerator:
    try:
        return _default_generator()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=f"Generation provider not configured: {e}")


@router.get("")
def api_index():
    return {
        "success": True,
        "message": "Video AI Generator API",
        "endpoints": {
            "generate": {"method": "POST", "path": "/api/generate", "description": "Generate quiz or Q&A from a video transcript"},
            "history": {"method": "GET", "path": "/api/history", "description": "List generated content"},
            "contentById": {"method": "GET", "path": "/api/history/{contentId}", "description": "Get content with answers separated"},
            "validateAnswers": {"method": "POST", "path": "/api/history/{contentId}/validate", "description": "Validate user answers"},
        },
    }


@router.post("/generate", status_code=status.HTTP_201_CREATED)
def generate(
    req: GenerateRequest,
    response: Response,
    db: Session = Depends(get_db),
    generator: ContentGenerator = Depends(get_generator),
):
    try:
        row, cached = process_generation(
            db,
            generator,
            video_identifier=req.video_identifier,
            content_type=req.content_type,
            transcript=req.transcript,
            page_title=req.page_title,
            domain=req.domain,
            page_url=req.page_url,
            video_src=req.video_src,
            duration_seconds=req.video_duration,
        )
    except InsufficientContentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate {req.content_type} content: {e}")

    if cached:
        response.status_code = status.HTTP_200_OK
    return {"success": True, "cached": cached, **content_to_dict(row)}


@router.get("/history")
def history(
    type: Literal["quiz", "qa"] | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return list_history(db, content_type=type)


@router.get("/history/{content_id}")
def content_detail(content_id: str, db: Session = Depends(get_db)):
    try:
        return {"success": True, **get_redacted(db, content_id)}
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/history/{content_id}/validate")
def content_validate(content_id: str, req: ValidateAnswersRequest, db: Session = Depends(get_db)):
    try:
        return {"success": True, **validate_answers(db, content_id, req.user_answers)}
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
