"""Aramaic Quiz API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map QuizError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; this module only wires
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aramaic_quiz.api.error_handlers import register_error_handlers
from aramaic_quiz.api.routes import game, health, leaderboard, players, questions
from aramaic_quiz.config import get_settings
from aramaic_quiz.infrastructure import database
from aramaic_quiz.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(settings.database_url, **settings.pool_options())
    logger.info("Aramaic Quiz API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Aramaic Quiz API shutting down")


app = FastAPI(
    title="Aramaic Quiz API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(players.router)
app.include_router(game.router)
app.include_router(questions.router)
app.include_router(leaderboard.router)

register_error_handlers(app)
