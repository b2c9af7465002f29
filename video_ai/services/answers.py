from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.orm import Session

from video_ai.services.content_store import get_content, payload_of
from video_ai.services.generation.schema import QuizPayload


def _answer_for(user_answers: Mapping[Any, Any], index: int) -> Any:
    # JSON object keys arrive as strings; python callers may use ints
    if index in user_answers:
        return user_answers[index]
    return user_answers.get(str(index))


def _matches(user_answer: Any, answer_index: int) -> bool:
    # bool is an int subclass; True must not count as option 1
    return type(user_answer) is int and user_answer == answer_index


def validate_answers(db: Session, content_id: str, user_answers: Mapping[Any, Any] | None) -> dict[str, Any]:
    """
    Score a quiz or return reference answers for a Q&A set.

    Missing indices are reported with userAnswer=None and never raise.
    Q&A is open-ended, so no correctness is judged and score is None.
    """
    row = get_content(db, content_id)
    payload = payload_of(row)
    user_answers = user_answers or {}

    results: list[dict[str, Any]] = []

    if isinstance(payload, QuizPayload):
        for i, q in enumerate(payload.questions):
            user_answer = _answer_for(user_answers, i)
            results.append(
                {
                    "questionIndex": i,
                    "isCorrect": _matches(user_answer, q.answer_index),
                    "userAnswer": user_answer,
                    "correctAnswer": q.answer_index,
                    "correctOption": q.options[q.answer_index],
                    "explanation": q.explanation,
                }
            )
        score: int | None = sum(1 for r in results if r["isCorrect"])
    else:
        for i, it in enumerate(payload.qa):
            results.append(
                {
                    "questionIndex": i,
                    "userAnswer": _answer_for(user_answers, i),
                    "correctAnswer": it.answer,
                }
            )
        score = None

    return {
        "contentType": row.content_type,
        "results": results,
        "score": score,
        "total": len(results),
    }
