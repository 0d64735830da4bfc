"""SQL Profile Aggregator — once-per-session recording of finished games.

Invariants:
    - First delivery of a session id updates stats and returns True
    - Redelivery returns False and changes nothing
    - high_score keeps the maximum, last_score follows the latest game
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from aramaic_quiz.core.game_rules import finalize, new_session
from aramaic_quiz.infrastructure.profile_aggregator import SqlProfileAggregator
from aramaic_quiz.infrastructure.session_store import SqlSessionStore
from aramaic_quiz.models.player import Player

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def aggregator(test_db):
    return SqlProfileAggregator(test_db)


@pytest.fixture
def finished_session(test_db, player):
    """Persist a finished session row for game_results to reference."""
    store = SqlSessionStore(test_db)

    async def _make():
        record = new_session(uuid4(), player.id, NOW)
        await store.create(record)
        return await store.save(finalize(record, NOW))

    return _make


async def _player(factory, player_id) -> Player:
    async with factory() as db:
        return await db.get(Player, player_id)


async def test_records_first_delivery(
    aggregator, finished_session, player, test_db, test_session_factory,
):
    session = await finished_session()

    assert await aggregator.record_game_result(session.id, player.id, 7, 7) is True
    await test_db.commit()

    stored = await _player(test_session_factory, player.id)
    assert stored.games_played == 1
    assert stored.correct_answers == 7
    assert stored.high_score == 7
    assert stored.last_score == 7


async def test_redelivery_is_a_noop(
    aggregator, finished_session, player, test_db, test_session_factory,
):
    session = await finished_session()
    await aggregator.record_game_result(session.id, player.id, 7, 7)
    await test_db.commit()

    assert await aggregator.record_game_result(session.id, player.id, 7, 7) is False
    await test_db.commit()

    stored = await _player(test_session_factory, player.id)
    assert stored.games_played == 1
    assert stored.correct_answers == 7


async def test_high_score_keeps_maximum(
    aggregator, finished_session, player, test_db, test_session_factory,
):
    for score in (12, 4):
        session = await finished_session()
        await aggregator.record_game_result(session.id, player.id, score, score)
    await test_db.commit()

    stored = await _player(test_session_factory, player.id)
    assert stored.games_played == 2
    assert stored.correct_answers == 16
    assert stored.high_score == 12
    assert stored.last_score == 4


async def test_rank_counts_players_strictly_ahead(aggregator, player, test_db):
    test_db.add_all([
        Player(username="ahead", high_score=10, correct_answers=1),
        Player(username="tied_more", high_score=3, correct_answers=9),
        Player(username="behind", high_score=1, correct_answers=50),
    ])
    await test_db.commit()
    me = Player(username="me", high_score=3, correct_answers=4)
    test_db.add(me)
    await test_db.commit()

    assert await aggregator.rank_of(me) == 3


async def test_top_players_clamps_count(aggregator, player):
    assert [p.id for p in await aggregator.top_players(0)] == [player.id]
    assert len(await aggregator.top_players(1000)) == 1
