"""Player Titles — threshold lookup for rank titles."""

import pytest

from aramaic_quiz.core.player_titles import TITLES, title_for_score


@pytest.mark.parametrize("score,title", [
    (0, "מתחיל"),
    (9, "מתחיל"),
    (10, "חניך"),
    (25, "תלמיד"),
    (49, "תלמיד"),
    (50, "בחור"),
    (100, "אברך"),
    (200, "חכם"),
    (499, "חכם"),
    (500, "רב"),
    (1000, "גאון"),
    (25_000, "גאון"),
])
def test_title_for_score(score, title):
    assert title_for_score(score) == title


def test_thresholds_ascending():
    thresholds = [t[0] for t in TITLES]
    assert thresholds == sorted(thresholds)
    assert thresholds[0] == 0
