"""Game Schemas — request/response models for the session endpoints.

Invariants:
    - selected_option_index is -1 (time expired) or a valid option index 0-3
    - AnswerSubmit carries no correct answer: the server looks it up
    - final_score present only when game_over
"""

from uuid import UUID

from pydantic import BaseModel, Field

from aramaic_quiz.core.domain_types import OPTIONS_PER_QUESTION, TIMEOUT_SELECTION


class StartSessionResponse(BaseModel):
    session_id: UUID
    lives: int
    score: int


class CurrentSessionResponse(BaseModel):
    session_id: UUID
    lives: int
    score: int
    correct_answers: int
    questions_answered: list[UUID]


class AnswerSubmit(BaseModel):
    """Player's answer to one question."""
    session_id: UUID
    question_id: UUID
    selected_option_index: int = Field(
        ge=TIMEOUT_SELECTION, le=OPTIONS_PER_QUESTION - 1,
    )


class AnswerResponse(BaseModel):
    is_correct: bool
    correct_option_index: int
    lives: int
    score: int
    game_over: bool
    final_score: int | None = None
    bonus_life_awarded: bool


class EndSessionRequest(BaseModel):
    session_id: UUID


class EndSessionResponse(BaseModel):
    final_score: int
    correct_answers: int
    total_questions_answered: int
