"""Game Routes — HTTP surface of the session engine.

Invariants:
    - Every route acts on behalf of the X-Player-Id caller only
    - Routes translate schemas <-> engine calls; no scoring logic here
    - Engine errors propagate to the global QuizError handler unchanged
"""

import logging

from fastapi import APIRouter, Depends

from aramaic_quiz.api.dependencies import get_owner_id, get_session_engine
from aramaic_quiz.core.domain_types import OwnerId, SessionId, QuestionId
from aramaic_quiz.schemas.game import (
    AnswerResponse,
    AnswerSubmit,
    CurrentSessionResponse,
    EndSessionRequest,
    EndSessionResponse,
    StartSessionResponse,
)
from aramaic_quiz.services.session_engine import SessionEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/game", tags=["game"])


@router.post("/start", response_model=StartSessionResponse)
async def start_game(
    owner_id: OwnerId = Depends(get_owner_id),
    engine: SessionEngine = Depends(get_session_engine),
):
    """Start a new game, abandoning any game still active."""
    result = await engine.start_session(owner_id)
    return StartSessionResponse(
        session_id=result.session_id, lives=result.lives, score=result.score,
    )


@router.get("/current", response_model=CurrentSessionResponse)
async def current_game(
    owner_id: OwnerId = Depends(get_owner_id),
    engine: SessionEngine = Depends(get_session_engine),
):
    """The caller's active game, for resuming after an app restart."""
    record = await engine.current_session(owner_id)
    return CurrentSessionResponse(
        session_id=record.id,
        lives=record.lives,
        score=record.score,
        correct_answers=record.correct_answers,
        questions_answered=list(record.questions_answered),
    )


@router.post("/answer", response_model=AnswerResponse)
async def submit_answer(
    body: AnswerSubmit,
    owner_id: OwnerId = Depends(get_owner_id),
    engine: SessionEngine = Depends(get_session_engine),
):
    """Submit an answer (selected_option_index -1 when the timer ran out)."""
    result = await engine.submit_answer(
        SessionId(body.session_id),
        owner_id,
        QuestionId(body.question_id),
        body.selected_option_index,
    )
    return AnswerResponse(
        is_correct=result.is_correct,
        correct_option_index=result.correct_option_index,
        lives=result.lives,
        score=result.score,
        game_over=result.game_over,
        final_score=result.final_score,
        bonus_life_awarded=result.bonus_life_awarded,
    )


@router.post("/end", response_model=EndSessionResponse)
async def end_game(
    body: EndSessionRequest,
    owner_id: OwnerId = Depends(get_owner_id),
    engine: SessionEngine = Depends(get_session_engine),
):
    """End the game voluntarily."""
    result = await engine.end_session(SessionId(body.session_id), owner_id)
    return EndSessionResponse(
        final_score=result.final_score,
        correct_answers=result.correct_answers,
        total_questions_answered=result.total_questions_answered,
    )
