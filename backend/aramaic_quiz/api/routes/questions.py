"""Question Routes — random and by-id question fetches for the game loop.

Invariants:
    - Responses never include the correct answer
    - /random excludes the ids the client already saw in this game
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.config import get_settings
from aramaic_quiz.core.domain_types import QuestionId
from aramaic_quiz.core.errors import QuestionNotFoundError
from aramaic_quiz.infrastructure.database import get_db
from aramaic_quiz.infrastructure.question_source import SqlQuestionSource
from aramaic_quiz.models.question import Question
from aramaic_quiz.schemas.question import QuestionResponse

router = APIRouter(prefix="/api/v1/questions", tags=["questions"])


def _to_response(question: Question) -> QuestionResponse:
    return QuestionResponse(
        id=question.id,
        aramaic=question.aramaic,
        hebrew=question.hebrew,
        options=question.options,
        audio_file=question.audio_file,
        category=question.category,
        difficulty=question.difficulty,
    )


async def get_question_source(
    db: AsyncSession = Depends(get_db),
) -> SqlQuestionSource:
    return SqlQuestionSource(db, get_settings().store_timeout_seconds)


@router.get("/random", response_model=QuestionResponse)
async def random_question(
    exclude_ids: list[UUID] | None = Query(None),
    source: SqlQuestionSource = Depends(get_question_source),
):
    """Random active question not in exclude_ids."""
    question = await source.random_question(exclude_ids)
    if question is None:
        raise QuestionNotFoundError()
    return _to_response(question)


@router.get("/stats/count")
async def count_questions(
    source: SqlQuestionSource = Depends(get_question_source),
):
    """Number of active questions."""
    return {"count": await source.count_active()}


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: UUID,
    source: SqlQuestionSource = Depends(get_question_source),
):
    question = await source.get_question(QuestionId(question_id))
    if question is None:
        raise QuestionNotFoundError(str(question_id))
    return _to_response(question)
