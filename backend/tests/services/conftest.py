"""Service test fixtures — async DB, seeded players/questions, engine, test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - get_db dependency overridden to use test DB sessions
    - db_manager patched for code paths that bypass get_db (readiness check)
    - Engines built here use a fixed clock and a spy around the profile aggregator

Design Decisions:
    - File-backed SQLite over :memory:: separate AsyncSessions get separate
      connections, so a write committed by one session is a real concurrent
      write from the point of view of another
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from aramaic_quiz.db.base import Base
from aramaic_quiz.infrastructure.database import get_db, DatabaseSessionManager
from aramaic_quiz.infrastructure.identity import SqlIdentityProvider
from aramaic_quiz.infrastructure.profile_aggregator import SqlProfileAggregator
from aramaic_quiz.infrastructure.question_source import SqlQuestionSource
from aramaic_quiz.infrastructure.session_store import SqlSessionStore
from aramaic_quiz.models.player import Player
from aramaic_quiz.models.question import Question
from aramaic_quiz.services.session_engine import SessionEngine
import aramaic_quiz.infrastructure.database as db_module
import aramaic_quiz.models  # noqa: F401
from aramaic_quiz.main import app

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
CORRECT_OPTION = 1
WRONG_OPTION = 0


class SpyAggregator:
    """Records every record_game_result call, then delegates."""

    def __init__(self, inner):
        self.inner = inner
        self.calls: list[dict] = []

    async def record_game_result(
        self, session_id, owner_id, correct_answers, final_score,
    ):
        self.calls.append({
            "session_id": session_id,
            "owner_id": owner_id,
            "correct_answers": correct_answers,
            "final_score": final_score,
        })
        return await self.inner.record_game_result(
            session_id, owner_id, correct_answers, final_score,
        )

    def calls_for(self, session_id) -> list[dict]:
        return [c for c in self.calls if c["session_id"] == session_id]


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'quiz.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def player(test_db):
    """A registered guest player."""
    p = Player(username="yochanan")
    test_db.add(p)
    await test_db.commit()
    await test_db.refresh(p)
    # detached: an engine rollback on test_db must not expire it
    test_db.expunge(p)
    return p


@pytest.fixture
async def question(test_db):
    """An active question whose correct option is CORRECT_OPTION."""
    q = Question(
        aramaic="אבא",
        hebrew="אב",
        options=["אם", "אב", "בן", "בת"],
        correct_answer=CORRECT_OPTION,
        category="family",
    )
    test_db.add(q)
    await test_db.commit()
    await test_db.refresh(q)
    test_db.expunge(q)
    return q


@pytest.fixture
def spy_aggregator(test_db):
    return SpyAggregator(SqlProfileAggregator(test_db))


@pytest.fixture
def make_engine(test_db, spy_aggregator):
    """Build a SessionEngine over test_db; keyword overrides replace collaborators."""

    def _make(**overrides) -> SessionEngine:
        kwargs = {
            "store": SqlSessionStore(test_db),
            "identity": SqlIdentityProvider(test_db),
            "profiles": spy_aggregator,
            "questions": SqlQuestionSource(test_db),
            "retry_base_delay_ms": 0,
            "clock": lambda: FIXED_NOW,
        }
        kwargs.update(overrides)
        return SessionEngine(test_db, **kwargs)

    return _make


@pytest.fixture
def session_engine(make_engine):
    return make_engine()


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
