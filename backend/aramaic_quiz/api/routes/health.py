"""Health Checks — liveness, and readiness to actually serve a game.

Invariants:
    - GET /health/ is 200 whenever the process is up
    - GET /health/ready is 200 only if the database answers AND at least one
      active question exists; otherwise 503 with a machine-readable reason
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from aramaic_quiz.core.errors import QuizError
from aramaic_quiz.infrastructure import database
from aramaic_quiz.infrastructure.question_source import SqlQuestionSource

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE = "aramaic-quiz-api"
VERSION = "1.0.0"


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE, "version": VERSION}


@router.get("/ready")
async def readiness_check():
    """A game needs a reachable store and a non-empty question bank."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return _not_ready("database_unavailable")

    try:
        async with manager.session() as db:
            active_questions = await SqlQuestionSource(db).count_active()
    except QuizError as e:
        logger.error(f"Readiness question count failed: {e.message}")
        return _not_ready("database_unavailable")

    if active_questions == 0:
        return _not_ready("no_active_questions")
    return {
        "status": "ready",
        "checks": {"database": "healthy", "active_questions": active_questions},
    }
