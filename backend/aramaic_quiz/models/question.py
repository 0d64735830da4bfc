"""Question ORM — quiz items served by the question source.

Invariants:
    - options holds exactly 4 strings; correct_answer is an index 0-3
    - Inactive questions are never served and never scored against
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, JSON, Index, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from aramaic_quiz.db.base import Base


class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_category_difficulty", "category", "difficulty"),
        CheckConstraint(
            "correct_answer BETWEEN 0 AND 3", name="correct_answer",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    aramaic: Mapped[str] = mapped_column(Text, nullable=False)
    hebrew: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list] = mapped_column(JSON, nullable=False)
    correct_answer: Mapped[int] = mapped_column(Integer, nullable=False)
    audio_file: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
    )
    category: Mapped[str] = mapped_column(
        String(50), nullable=False, default="general",
    )
    difficulty: Mapped[str] = mapped_column(
        String(10), nullable=False, default="medium",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
