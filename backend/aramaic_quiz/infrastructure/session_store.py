"""SQL Session Store — game_sessions persistence with compare-and-swap saves.

Invariants:
    - save() is UPDATE ... WHERE id = :id AND version = :read_version;
      rowcount != 1 raises ConcurrentModificationError
    - Reads bypass the identity map (populate_existing): a retry after rollback
      always sees committed state
    - Nothing here commits — the caller owns the transaction
    - Every call is bounded by store_timeout_seconds

Design Decisions:
    - Returns core SessionRecord values, never ORM rows: the engine cannot
      mutate persistence state behind the store's back
"""

import logging
from dataclasses import replace
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.core.domain_types import (
    SessionId, OwnerId, QuestionId, SessionStatus,
)
from aramaic_quiz.core.errors import ConcurrentModificationError, ErrorContext
from aramaic_quiz.core.game_rules import SessionRecord
from aramaic_quiz.infrastructure.database import bounded_store_call
from aramaic_quiz.models.game_session import GameSession

logger = logging.getLogger(__name__)


def _to_record(row: GameSession) -> SessionRecord:
    return SessionRecord(
        id=SessionId(row.id),
        owner_id=OwnerId(row.owner_id),
        started_at=row.started_at,
        score=row.score,
        lives=row.lives,
        questions_answered=tuple(
            QuestionId(UUID(str(q))) for q in (row.questions_answered or [])
        ),
        correct_answers=row.correct_answers,
        status=SessionStatus(row.status),
        ended_at=row.ended_at,
        final_score=row.final_score,
        version=row.version,
    )


def _mutable_columns(record: SessionRecord) -> dict:
    return {
        "score": record.score,
        "lives": record.lives,
        "questions_answered": [str(q) for q in record.questions_answered],
        "correct_answers": record.correct_answers,
        "status": record.status.value,
        "ended_at": record.ended_at,
        "final_score": record.final_score,
    }


class SqlSessionStore:
    """SessionStore over an AsyncSession shared with the other collaborators."""

    def __init__(self, db: AsyncSession, timeout_seconds: float = 5.0):
        self._db = db
        self._timeout = timeout_seconds

    async def create(self, record: SessionRecord) -> SessionRecord:
        row = GameSession(
            id=record.id,
            owner_id=record.owner_id,
            started_at=record.started_at,
            version=record.version,
            **_mutable_columns(record),
        )
        self._db.add(row)
        await bounded_store_call(self._db.flush(), "create", self._timeout)
        return record

    async def find_active_by_owner(self, owner_id: OwnerId) -> SessionRecord | None:
        query = (
            select(GameSession)
            .where(
                GameSession.owner_id == owner_id,
                GameSession.status == SessionStatus.ACTIVE.value,
            )
            .execution_options(populate_existing=True)
        )
        result = await bounded_store_call(
            self._db.execute(query), "find_active_by_owner", self._timeout,
        )
        row = result.scalars().first()
        return _to_record(row) if row else None

    async def find_by_id(self, session_id: SessionId) -> SessionRecord | None:
        query = (
            select(GameSession)
            .where(GameSession.id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await bounded_store_call(
            self._db.execute(query), "find_by_id", self._timeout,
        )
        row = result.scalar_one_or_none()
        return _to_record(row) if row else None

    async def save(self, record: SessionRecord) -> SessionRecord:
        stmt = (
            update(GameSession)
            .where(
                GameSession.id == record.id,
                GameSession.version == record.version,
            )
            .values(version=record.version + 1, **_mutable_columns(record))
            .execution_options(synchronize_session=False)
        )
        result = await bounded_store_call(
            self._db.execute(stmt), "save", self._timeout,
        )
        if result.rowcount != 1:
            logger.info(
                f"Stale session version {record.version} on save",
                extra={"session_id": record.id},
            )
            raise ConcurrentModificationError(
                f"Game session '{record.id}' changed since version {record.version}",
                context=ErrorContext(session_id=str(record.id)),
            )
        return replace(record, version=record.version + 1)
