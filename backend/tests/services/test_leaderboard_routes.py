"""Leaderboard API — rank lookup and top-N ordering.

Invariants:
    - Ranking is high_score desc, then correct_answers desc
    - rank = 1 + players strictly ahead; full ties share a rank
    - /top/{count} is capped at 100 entries
"""

from uuid import uuid4

import pytest

from aramaic_quiz.models.player import Player


@pytest.fixture
async def ranked_players(test_db):
    """Four players; 'shmuel' and 'rav' tie on high score."""
    rows = [
        Player(username="hillel", high_score=120, correct_answers=300),
        Player(username="shmuel", high_score=60, correct_answers=90),
        Player(username="rav", high_score=60, correct_answers=150),
        Player(username="shammai", high_score=5, correct_answers=5),
    ]
    test_db.add_all(rows)
    await test_db.commit()
    return {p.username: p.id for p in rows}


async def test_rank_orders_by_high_score_then_correct_answers(client, ranked_players):
    expected = {"hillel": 1, "rav": 2, "shmuel": 3, "shammai": 4}
    for username, rank in expected.items():
        response = await client.get(
            f"/api/v1/leaderboard/rank/{ranked_players[username]}",
        )
        assert response.status_code == 200
        assert response.json()["rank"] == rank


async def test_rank_payload(client, ranked_players):
    body = (await client.get(
        f"/api/v1/leaderboard/rank/{ranked_players['hillel']}",
    )).json()
    assert body == {"rank": 1, "username": "hillel", "score": 120, "title": "אברך"}


async def test_full_ties_share_a_rank(client, test_db):
    a = Player(username="abaye", high_score=30, correct_answers=30)
    b = Player(username="rava", high_score=30, correct_answers=30)
    test_db.add_all([a, b])
    await test_db.commit()

    ranks = [
        (await client.get(f"/api/v1/leaderboard/rank/{p.id}")).json()["rank"]
        for p in (a, b)
    ]
    assert ranks == [1, 1]


async def test_rank_of_unknown_player(client):
    response = await client.get(f"/api/v1/leaderboard/rank/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PLAYER_NOT_FOUND"


async def test_top_players_in_order(client, ranked_players):
    entries = (await client.get("/api/v1/leaderboard/top/3")).json()

    assert [e["username"] for e in entries] == ["hillel", "rav", "shmuel"]
    assert [e["rank"] for e in entries] == [1, 2, 3]
    assert entries[0] == {
        "rank": 1, "username": "hillel", "score": 120,
        "correct_answers": 300, "title": "אברך",
    }


async def test_top_players_capped_at_one_hundred(client, test_db):
    test_db.add_all(
        Player(username=f"talmid{i:03d}", high_score=i) for i in range(105)
    )
    await test_db.commit()

    entries = (await client.get("/api/v1/leaderboard/top/500")).json()

    assert len(entries) == 100
    assert entries[0]["score"] == 104


async def test_top_players_rejects_zero(client):
    response = await client.get("/api/v1/leaderboard/top/0")
    assert response.status_code == 400
