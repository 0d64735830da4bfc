"""Player ORM — guest identity plus cumulative game stats.

Invariants:
    - username is unique (guest login resolves by name)
    - games_played, correct_answers, high_score only change via ProfileAggregator
    - high_score is the max final_score over all recorded sessions

Design Decisions:
    - Stats denormalized on the player row: profile and title reads need no aggregation
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from aramaic_quiz.db.base import Base


class Player(Base):
    """Player profile — owner of game sessions."""
    __tablename__ = "players"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True, index=True,
    )
    games_played: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    correct_answers: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    high_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, index=True,
    )
    last_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
