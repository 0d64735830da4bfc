"""Boundary Protocols — contracts between the session engine and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - SessionStore.save is compare-and-swap on SessionRecord.version
    - ProfileAggregator.record_game_result is idempotent per session id

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; core/game_rules stays sync and pure
"""

from typing import Protocol

from aramaic_quiz.core.domain_types import SessionId, OwnerId, QuestionId
from aramaic_quiz.core.game_rules import SessionRecord


class SessionStore(Protocol):
    """Durable Session records — implemented by infrastructure/session_store.py."""
    async def create(self, record: SessionRecord) -> SessionRecord: ...
    async def find_active_by_owner(self, owner_id: OwnerId) -> SessionRecord | None: ...
    async def find_by_id(self, session_id: SessionId) -> SessionRecord | None: ...
    async def save(self, record: SessionRecord) -> SessionRecord:
        """Replace the stored record. Raises ConcurrentModificationError when
        the stored version is no longer record.version."""
        ...


class IdentityProvider(Protocol):
    """Resolves owner ids to existing player profiles."""
    async def resolve_owner(self, owner_id: OwnerId) -> bool: ...


class QuestionSource(Protocol):
    """Authoritative answers for quiz items."""
    async def get_correct_option(self, question_id: QuestionId) -> int | None: ...


class ProfileAggregator(Protocol):
    """Rolls finished sessions into cumulative player stats."""
    async def record_game_result(
        self,
        session_id: SessionId,
        owner_id: OwnerId,
        correct_answers: int,
        final_score: int,
    ) -> bool:
        """Returns False when session_id was already recorded (no-op)."""
        ...
