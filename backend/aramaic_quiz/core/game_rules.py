"""Game Rules — the session state machine as pure functions over SessionRecord.

Invariants:
    - ACTIVE -> FINISHED is the only transition; FINISHED is terminal
    - Every answer appends its question id, correct or not
    - Correct: score +1, correct_answers +1, +1 life when correct_answers % 50 == 0
    - Wrong (including TIMEOUT_SELECTION): lives -1
    - lives <= 0 finishes the session inside apply_answer (never a separate step)
    - ended_at and final_score are set exactly once, by finalize()

Design Decisions:
    - Frozen dataclass + dataclasses.replace: a failed compare-and-swap can be
      retried from a fresh read without undoing in-place mutations
    - `now` is a parameter, not read from the clock: rules stay deterministic
    - version is carried but never bumped here (the store owns revisions)
"""

from dataclasses import dataclass, replace
from datetime import datetime

from aramaic_quiz.core.domain_types import (
    SessionId, OwnerId, QuestionId, SessionStatus,
    INITIAL_LIVES, BONUS_LIFE_INTERVAL, TIMEOUT_SELECTION,
)


@dataclass(frozen=True)
class SessionRecord:
    """One player's game — pure value, mirrors the game_sessions row."""
    id: SessionId
    owner_id: OwnerId
    started_at: datetime
    score: int = 0
    lives: int = INITIAL_LIVES
    questions_answered: tuple[QuestionId, ...] = ()
    correct_answers: int = 0
    status: SessionStatus = SessionStatus.ACTIVE
    ended_at: datetime | None = None
    final_score: int | None = None
    version: int = 1

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def total_questions_answered(self) -> int:
        return len(self.questions_answered)


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of applying one answer to a session."""
    record: SessionRecord
    is_correct: bool
    bonus_life_awarded: bool

    @property
    def game_over(self) -> bool:
        return self.record.status == SessionStatus.FINISHED


def new_session(
    session_id: SessionId, owner_id: OwnerId, now: datetime,
) -> SessionRecord:
    """Fresh ACTIVE session: score 0, INITIAL_LIVES, nothing answered."""
    return SessionRecord(id=session_id, owner_id=owner_id, started_at=now)


def is_correct_selection(selected_option_index: int, correct_option_index: int) -> bool:
    if selected_option_index == TIMEOUT_SELECTION:
        return False
    return selected_option_index == correct_option_index


def earns_bonus_life(correct_answers: int) -> bool:
    """True on every BONUS_LIFE_INTERVAL-th correct answer (50, 100, ...)."""
    return correct_answers > 0 and correct_answers % BONUS_LIFE_INTERVAL == 0


def finalize(record: SessionRecord, now: datetime) -> SessionRecord:
    """Close an ACTIVE session, snapshotting its score as final_score."""
    if not record.is_active:
        raise ValueError(f"session {record.id} is already finished")
    return replace(
        record,
        status=SessionStatus.FINISHED,
        ended_at=now,
        final_score=record.score,
    )


def apply_answer(
    record: SessionRecord,
    question_id: QuestionId,
    selected_option_index: int,
    correct_option_index: int,
    now: datetime,
) -> AnswerOutcome:
    """Score one submission and finish the session if lives run out."""
    if not record.is_active:
        raise ValueError(f"session {record.id} is already finished")

    correct = is_correct_selection(selected_option_index, correct_option_index)
    answered = record.questions_answered + (question_id,)
    bonus = False

    if correct:
        correct_answers = record.correct_answers + 1
        bonus = earns_bonus_life(correct_answers)
        updated = replace(
            record,
            questions_answered=answered,
            score=record.score + 1,
            correct_answers=correct_answers,
            lives=record.lives + (1 if bonus else 0),
        )
    else:
        updated = replace(
            record,
            questions_answered=answered,
            lives=record.lives - 1,
        )

    if updated.lives <= 0:
        updated = finalize(updated, now)

    return AnswerOutcome(
        record=updated, is_correct=correct, bonus_life_awarded=bonus,
    )
