"""Username Rules — stripping and 2-20 length bounds."""

import pytest

from aramaic_quiz.core.enforce_username import normalize_username
from aramaic_quiz.core.errors import InvalidUsernameError


def test_strips_whitespace():
    assert normalize_username("  רבי  ") == "רבי"


def test_accepts_bounds():
    assert normalize_username("ab") == "ab"
    assert normalize_username("x" * 20) == "x" * 20


@pytest.mark.parametrize("raw", ["", " ", "a", "  a  ", "x" * 21, None])
def test_rejects_out_of_bounds(raw):
    with pytest.raises(InvalidUsernameError) as exc:
        normalize_username(raw)
    assert exc.value.http_status == 400
    assert exc.value.code == "VALIDATION_ERROR"
