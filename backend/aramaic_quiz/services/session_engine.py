"""Session Engine — start / submit / end orchestration around core/game_rules.

Invariants:
    - One request = one transaction: every write of an operation (session row,
      previous session's finalize, game_results ledger, player stats) commits
      together or not at all
    - ConcurrentModificationError triggers rollback + fresh read + recompute, at
      most max_retries times, before it surfaces to the caller
    - SessionNotFoundError for missing, foreign and finished sessions alike
    - The correct option comes from the QuestionSource when one is configured;
      a caller-supplied index is only trusted without one
    - Rollbacks are bounded by store_timeout_seconds like every other store call
    - A finished session is never finalized twice: the second attempt sees
      FINISHED on re-read and fails with SessionNotFoundError

Design Decisions:
    - Impureim sandwich: read via SessionStore -> pure apply_answer/finalize ->
      write via SessionStore.save (compare-and-swap on version)
    - Retry with exponential backoff and ±25% jitter: two racing double-taps
      would otherwise collide again on the immediate retry
    - clock and id_factory injectable: tests pin time and ids without patching
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, TypeVar
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.config import Settings
from aramaic_quiz.core.domain_types import SessionId, OwnerId, QuestionId
from aramaic_quiz.core.errors import (
    ConcurrentModificationError,
    ErrorContext,
    QuestionNotFoundError,
    QuizError,
    SessionNotFoundError,
    UnknownOwnerError,
)
from aramaic_quiz.core.game_rules import (
    SessionRecord, apply_answer, finalize, new_session,
)
from aramaic_quiz.core.repository_protocols import (
    IdentityProvider, ProfileAggregator, QuestionSource, SessionStore,
)
from aramaic_quiz.infrastructure.database import bounded_store_call
from aramaic_quiz.infrastructure.identity import SqlIdentityProvider
from aramaic_quiz.infrastructure.profile_aggregator import SqlProfileAggregator
from aramaic_quiz.infrastructure.question_source import SqlQuestionSource
from aramaic_quiz.infrastructure.session_store import SqlSessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -- Operation results ---------------------------------------------------------

@dataclass(frozen=True)
class StartResult:
    session_id: SessionId
    lives: int
    score: int


@dataclass(frozen=True)
class SubmitResult:
    is_correct: bool
    lives: int
    score: int
    game_over: bool
    bonus_life_awarded: bool
    correct_option_index: int
    final_score: int | None = None


@dataclass(frozen=True)
class EndResult:
    final_score: int
    correct_answers: int
    total_questions_answered: int


# -- Engine --------------------------------------------------------------------

class SessionEngine:
    """The game-session state machine over injected collaborators."""

    def __init__(
        self,
        db: AsyncSession,
        store: SessionStore,
        identity: IdentityProvider,
        profiles: ProfileAggregator,
        questions: QuestionSource | None = None,
        *,
        max_retries: int = 3,
        retry_base_delay_ms: int = 20,
        retry_max_delay_ms: int = 500,
        store_timeout_seconds: float = 5.0,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._db = db
        self._store = store
        self._identity = identity
        self._profiles = profiles
        self._questions = questions
        self._max_retries = max_retries
        self._retry_base_delay_ms = retry_base_delay_ms
        self._retry_max_delay_ms = retry_max_delay_ms
        self._timeout = store_timeout_seconds
        self._clock = clock
        self._id_factory = id_factory

    # -- public operations -----------------------------------------------------

    async def start_session(self, owner_id: OwnerId) -> StartResult:
        """Abandon any active game of the owner and open a fresh one."""
        if not await self._identity.resolve_owner(owner_id):
            raise UnknownOwnerError(str(owner_id))

        async def attempt() -> StartResult:
            now = self._clock()
            previous = await self._store.find_active_by_owner(owner_id)
            if previous is not None:
                await self._finalize(previous, now)
                logger.info(
                    "Previous active session abandoned",
                    extra={"session_id": previous.id, "owner_id": owner_id},
                )
            record = new_session(SessionId(self._id_factory()), owner_id, now)
            await self._store.create(record)
            return StartResult(
                session_id=record.id, lives=record.lives, score=record.score,
            )

        result = await self._transaction(
            "start_session", attempt, ErrorContext(owner_id=str(owner_id)),
        )
        logger.info(
            "Game session started",
            extra={"session_id": result.session_id, "owner_id": owner_id},
        )
        return result

    async def submit_answer(
        self,
        session_id: SessionId,
        owner_id: OwnerId,
        question_id: QuestionId,
        selected_option_index: int,
        correct_option_index: int | None = None,
    ) -> SubmitResult:
        """Score one answer; selected_option_index -1 means time ran out."""

        async def attempt() -> SubmitResult:
            record = await self._load_active(session_id, owner_id)
            correct_index = await self._resolve_correct_option(
                question_id, correct_option_index,
            )
            outcome = apply_answer(
                record, question_id, selected_option_index,
                correct_index, self._clock(),
            )
            saved = await self._store.save(outcome.record)
            if outcome.game_over:
                await self._forward_result(saved)
            return SubmitResult(
                is_correct=outcome.is_correct,
                lives=saved.lives,
                score=saved.score,
                game_over=outcome.game_over,
                bonus_life_awarded=outcome.bonus_life_awarded,
                correct_option_index=correct_index,
                final_score=saved.final_score if outcome.game_over else None,
            )

        result = await self._transaction(
            "submit_answer", attempt,
            ErrorContext(session_id=str(session_id), owner_id=str(owner_id)),
        )
        if result.game_over:
            logger.info(
                f"Game over with final score {result.final_score}",
                extra={"session_id": session_id, "owner_id": owner_id},
            )
        return result

    async def end_session(
        self, session_id: SessionId, owner_id: OwnerId,
    ) -> EndResult:
        """Voluntary termination — same finalize path as running out of lives."""

        async def attempt() -> EndResult:
            record = await self._load_active(session_id, owner_id)
            finished = await self._finalize(record, self._clock())
            return EndResult(
                final_score=finished.final_score,
                correct_answers=finished.correct_answers,
                total_questions_answered=finished.total_questions_answered,
            )

        result = await self._transaction(
            "end_session", attempt,
            ErrorContext(session_id=str(session_id), owner_id=str(owner_id)),
        )
        logger.info(
            f"Game session ended by player with final score {result.final_score}",
            extra={"session_id": session_id, "owner_id": owner_id},
        )
        return result

    async def current_session(self, owner_id: OwnerId) -> SessionRecord:
        """Read-only view of the owner's active session."""
        record = await self._store.find_active_by_owner(owner_id)
        if record is None:
            raise SessionNotFoundError(
                "active", ErrorContext(owner_id=str(owner_id)),
            )
        return record

    # -- internals -------------------------------------------------------------

    async def _load_active(
        self, session_id: SessionId, owner_id: OwnerId,
    ) -> SessionRecord:
        record = await self._store.find_by_id(session_id)
        if record is None or record.owner_id != owner_id or not record.is_active:
            raise SessionNotFoundError(
                str(session_id), ErrorContext(owner_id=str(owner_id)),
            )
        return record

    async def _resolve_correct_option(
        self, question_id: QuestionId, supplied: int | None,
    ) -> int:
        if self._questions is None:
            if supplied is None:
                raise ValueError(
                    "correct_option_index is required without a question source",
                )
            return supplied
        correct = await self._questions.get_correct_option(question_id)
        if correct is None:
            raise QuestionNotFoundError(str(question_id))
        if supplied is not None and supplied != correct:
            logger.warning(
                "Caller-supplied correct option ignored",
                extra={"question_id": question_id},
            )
        return correct

    async def _finalize(self, record: SessionRecord, now: datetime) -> SessionRecord:
        finished = await self._store.save(finalize(record, now))
        await self._forward_result(finished)
        return finished

    async def _forward_result(self, finished: SessionRecord) -> None:
        await self._profiles.record_game_result(
            finished.id,
            finished.owner_id,
            finished.correct_answers,
            finished.final_score,
        )

    async def _transaction(
        self,
        operation: str,
        attempt: Callable[[], Awaitable[T]],
        context: ErrorContext,
    ) -> T:
        """Run attempt() and commit; on conflict roll back and re-run."""
        for n in range(self._max_retries + 1):
            try:
                result = await attempt()
                await bounded_store_call(self._db.commit(), "commit", self._timeout)
                return result
            except ConcurrentModificationError as e:
                await self._rollback()
                if n >= self._max_retries:
                    logger.warning(
                        f"{operation} gave up after {self._max_retries} retries",
                        extra={"session_id": context.session_id, "attempt": n + 1},
                    )
                    e.attach_caller(context.session_id, context.owner_id)
                    e.context.retry_after_ms = self._backoff(self._max_retries)
                    raise
                delay = self._backoff(n)
                logger.info(
                    f"{operation} conflict, retry after {delay}ms",
                    extra={"session_id": context.session_id, "attempt": n + 1},
                )
                await asyncio.sleep(delay / 1000)
            except QuizError as e:
                await self._rollback()
                raise e.attach_caller(context.session_id, context.owner_id)
            except Exception:
                await self._rollback()
                raise
        raise AssertionError("unreachable")  # pragma: no cover

    async def _rollback(self) -> None:
        await bounded_store_call(self._db.rollback(), "rollback", self._timeout)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter, capped at retry_max_delay_ms."""
        delay = min((2 ** attempt) * self._retry_base_delay_ms, self._retry_max_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311


def build_session_engine(db: AsyncSession, settings: Settings) -> SessionEngine:
    """Wire the engine to the SQL collaborators sharing one AsyncSession."""
    timeout = settings.store_timeout_seconds
    return SessionEngine(
        db,
        store=SqlSessionStore(db, timeout),
        identity=SqlIdentityProvider(db, timeout),
        profiles=SqlProfileAggregator(db, timeout),
        questions=SqlQuestionSource(db, timeout),
        max_retries=settings.session_max_retries,
        retry_base_delay_ms=settings.session_retry_base_delay_ms,
        retry_max_delay_ms=settings.session_retry_max_delay_ms,
        store_timeout_seconds=timeout,
    )
