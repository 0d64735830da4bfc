"""Player Titles — rank title shown next to a player's high score."""

# (min_score, title), ascending
TITLES: tuple[tuple[int, str], ...] = (
    (0, "מתחיל"),
    (10, "חניך"),
    (25, "תלמיד"),
    (50, "בחור"),
    (100, "אברך"),
    (200, "חכם"),
    (500, "רב"),
    (1000, "גאון"),
)


def title_for_score(score: int) -> str:
    """Highest title whose threshold the score reaches."""
    title = TITLES[0][1]
    for min_score, name in TITLES:
        if score >= min_score:
            title = name
    return title
