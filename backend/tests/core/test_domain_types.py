"""Domain Types — verifies identity wrappers, enums and game constants."""

from uuid import uuid4

from aramaic_quiz.core.domain_types import (
    SessionId, OwnerId, QuestionId, SessionStatus, Difficulty,
    INITIAL_LIVES, BONUS_LIFE_INTERVAL, TIMEOUT_SELECTION, OPTIONS_PER_QUESTION,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert SessionId(uid) == uid
    assert OwnerId(uid) == uid
    assert QuestionId(uid) == uid


def test_session_status_has_two_states():
    assert set(SessionStatus) == {SessionStatus.ACTIVE, SessionStatus.FINISHED}
    assert SessionStatus.ACTIVE.value == "active"
    assert SessionStatus("finished") is SessionStatus.FINISHED


def test_difficulty_values():
    assert [d.value for d in Difficulty] == ["easy", "medium", "hard"]


def test_game_constants():
    assert INITIAL_LIVES == 3
    assert BONUS_LIFE_INTERVAL == 50
    assert TIMEOUT_SELECTION == -1
    assert OPTIONS_PER_QUESTION == 4
