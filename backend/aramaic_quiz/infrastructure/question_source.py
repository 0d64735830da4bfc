"""SQL Question Source — active quiz items and their authoritative answers.

Invariants:
    - Inactive questions are invisible (None), both for serving and for scoring
    - random_question never returns an id listed in exclude_ids
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.core.domain_types import QuestionId
from aramaic_quiz.infrastructure.database import bounded_store_call
from aramaic_quiz.models.question import Question


class SqlQuestionSource:
    """QuestionSource over the questions table."""

    def __init__(self, db: AsyncSession, timeout_seconds: float = 5.0):
        self._db = db
        self._timeout = timeout_seconds

    async def get_question(self, question_id: QuestionId) -> Question | None:
        result = await bounded_store_call(
            self._db.execute(
                select(Question).where(
                    Question.id == question_id, Question.is_active.is_(True),
                ),
            ),
            "get_question", self._timeout,
        )
        return result.scalar_one_or_none()

    async def get_correct_option(self, question_id: QuestionId) -> int | None:
        question = await self.get_question(question_id)
        return question.correct_answer if question else None

    async def random_question(
        self, exclude_ids: list[UUID] | None = None,
    ) -> Question | None:
        query = select(Question).where(Question.is_active.is_(True))
        if exclude_ids:
            query = query.where(Question.id.not_in(exclude_ids))
        query = query.order_by(func.random()).limit(1)
        result = await bounded_store_call(
            self._db.execute(query), "random_question", self._timeout,
        )
        return result.scalars().first()

    async def count_active(self) -> int:
        result = await bounded_store_call(
            self._db.execute(
                select(func.count()).select_from(Question).where(
                    Question.is_active.is_(True),
                ),
            ),
            "count_questions", self._timeout,
        )
        return result.scalar_one()
