"""Game API — end-to-end through FastAPI: guest login, play, end, profile.

Invariants:
    - X-Player-Id identifies the caller on every game route
    - Errors use the {"error": {...}} envelope with the mapped HTTP status
    - Question payloads never reveal the correct answer
"""

from uuid import uuid4

from aramaic_quiz.api.dependencies import get_session_engine
from aramaic_quiz.core.errors import (
    ConcurrentModificationError, ErrorContext, StoreUnavailableError,
)
from aramaic_quiz.main import app


async def _login(client, username="ravina") -> dict:
    response = await client.post(
        "/api/v1/players/guest", json={"username": username},
    )
    assert response.status_code == 200
    return response.json()


def _as(player: dict) -> dict:
    return {"X-Player-Id": player["id"]}


async def test_guest_login_is_find_or_create(client):
    first = await _login(client, "  ravina ")
    again = await _login(client, "ravina")

    assert first["id"] == again["id"]
    assert first["username"] == "ravina"
    assert first["games_played"] == 0
    assert first["title"] == "מתחיל"


async def test_guest_login_rejects_short_name(client):
    response = await client.post("/api/v1/players/guest", json={"username": " a "})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_start_requires_known_player(client):
    response = await client.post(
        "/api/v1/game/start", headers={"X-Player-Id": str(uuid4())},
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNKNOWN_OWNER"


async def test_start_requires_player_header(client):
    response = await client.post("/api/v1/game/start")
    assert response.status_code == 400


async def test_full_game_flow(client, question):
    player = await _login(client)
    started = (await client.post("/api/v1/game/start", headers=_as(player))).json()
    assert started["lives"] == 3 and started["score"] == 0

    current = await client.get("/api/v1/game/current", headers=_as(player))
    assert current.json()["session_id"] == started["session_id"]

    answer = await client.post("/api/v1/game/answer", headers=_as(player), json={
        "session_id": started["session_id"],
        "question_id": str(question.id),
        "selected_option_index": question.correct_answer,
    })
    assert answer.status_code == 200
    body = answer.json()
    assert body["is_correct"] is True
    assert body["score"] == 1
    assert body["correct_option_index"] == question.correct_answer
    assert body["final_score"] is None

    ended = await client.post("/api/v1/game/end", headers=_as(player), json={
        "session_id": started["session_id"],
    })
    assert ended.json() == {
        "final_score": 1, "correct_answers": 1, "total_questions_answered": 1,
    }

    me = (await client.get("/api/v1/players/me", headers=_as(player))).json()
    assert me["games_played"] == 1
    assert me["high_score"] == 1
    assert me["last_score"] == 1


async def test_game_over_then_session_not_found(client, question):
    player = await _login(client)
    started = (await client.post("/api/v1/game/start", headers=_as(player))).json()
    payload = {
        "session_id": started["session_id"],
        "question_id": str(question.id),
        "selected_option_index": -1,
    }

    for _ in range(3):
        last = await client.post("/api/v1/game/answer", headers=_as(player), json=payload)
    assert last.json()["game_over"] is True
    assert last.json()["final_score"] == 0

    response = await client.post("/api/v1/game/answer", headers=_as(player), json=payload)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "SESSION_NOT_FOUND"
    assert error["message"] == "Your game session has ended, please start a new game"

    current = await client.get("/api/v1/game/current", headers=_as(player))
    assert current.status_code == 404


async def test_answer_index_out_of_range(client, question):
    player = await _login(client)
    started = (await client.post("/api/v1/game/start", headers=_as(player))).json()

    response = await client.post("/api/v1/game/answer", headers=_as(player), json={
        "session_id": started["session_id"],
        "question_id": str(question.id),
        "selected_option_index": 4,
    })
    assert response.status_code == 400
    details = response.json()["error"]["details"]
    assert details[0]["field"] == "selected_option_index"


async def test_answer_for_unknown_question(client):
    player = await _login(client)
    started = (await client.post("/api/v1/game/start", headers=_as(player))).json()

    response = await client.post("/api/v1/game/answer", headers=_as(player), json={
        "session_id": started["session_id"],
        "question_id": str(uuid4()),
        "selected_option_index": 0,
    })
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "QUESTION_NOT_FOUND"


async def test_end_someone_elses_session(client):
    owner = await _login(client, "rava")
    intruder = await _login(client, "abaye")
    started = (await client.post("/api/v1/game/start", headers=_as(owner))).json()

    response = await client.post("/api/v1/game/end", headers=_as(intruder), json={
        "session_id": started["session_id"],
    })
    assert response.status_code == 404


async def test_random_question_hides_answer_and_honours_exclusions(client, question):
    response = await client.get("/api/v1/questions/random")
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(question.id)
    assert "correct_answer" not in body

    excluded = await client.get(
        "/api/v1/questions/random", params={"exclude_ids": [str(question.id)]},
    )
    assert excluded.status_code == 404
    error = excluded.json()["error"]
    assert error["message"] == "No more questions available"
    assert error["context"]["question_id"] is None


async def test_question_by_id(client, question):
    found = await client.get(f"/api/v1/questions/{question.id}")
    assert found.json()["options"] == question.options

    missing = await client.get(f"/api/v1/questions/{uuid4()}")
    assert missing.status_code == 404

    count = await client.get("/api/v1/questions/stats/count")
    assert count.json() == {"count": 1}


async def test_liveness(client):
    live = await client.get("/api/v1/health/")
    assert live.json()["status"] == "healthy"


async def test_readiness_with_questions(client, question):
    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["active_questions"] == 1


async def test_readiness_with_empty_question_bank(client):
    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 503
    assert ready.json()["reason"] == "no_active_questions"


class _FailingEngine:
    def __init__(self, error):
        self.error = error

    async def start_session(self, owner_id):
        raise self.error


async def test_conflict_surfaces_as_409_with_retry_after(client):
    player = await _login(client)
    error = ConcurrentModificationError(
        "stale", context=ErrorContext(retry_after_ms=1500),
    )
    app.dependency_overrides[get_session_engine] = lambda: _FailingEngine(error)

    response = await client.post("/api/v1/game/start", headers=_as(player))

    assert response.status_code == 409
    assert response.headers["Retry-After"] == "2"
    body = response.json()["error"]
    assert body["code"] == "CONCURRENT_MODIFICATION"
    assert body["retryable"] is True


async def test_store_outage_surfaces_as_503(client):
    player = await _login(client)
    error = StoreUnavailableError("timed out after 5.0s", "find_by_id")
    app.dependency_overrides[get_session_engine] = lambda: _FailingEngine(error)

    response = await client.post("/api/v1/game/start", headers=_as(player))

    assert response.status_code == 503
    assert response.headers["Retry-After"] == "1"
    assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"
