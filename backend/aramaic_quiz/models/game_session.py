"""GameSession ORM — persisted form of core.game_rules.SessionRecord.

Invariants:
    - At most one row per owner_id with status 'active' (partial unique index)
    - version starts at 1 and is bumped by every compare-and-swap save
    - questions_answered is an append-only JSON list of question id strings
    - ended_at / final_score are NULL until the session finishes

Design Decisions:
    - Explicit version column compared in the UPDATE's WHERE clause
      (infrastructure/session_store.py) rather than ORM-managed version_id_col:
      the store maps rowcount 0 straight to ConcurrentModificationError
    - JSON column for questions_answered: read and written whole with the row
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from aramaic_quiz.db.base import Base


class GameSession(Base):
    """One player's in-progress or finished game."""
    __tablename__ = "game_sessions"
    __table_args__ = (
        Index(
            "uq_game_sessions_active_owner", "owner_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("ix_game_sessions_final_score", "final_score"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("players.id"), nullable=False,
        index=True,
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lives: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    questions_answered: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    correct_answers: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active",
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    final_score: Mapped[int | None] = mapped_column(
        Integer, nullable=True,
    )
