"""Username Rules — guest display names are stripped and 2-20 chars long."""

from aramaic_quiz.core.domain_types import USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH
from aramaic_quiz.core.errors import InvalidUsernameError


def normalize_username(raw: str) -> str:
    """Strip whitespace and enforce length bounds. Raises InvalidUsernameError."""
    name = (raw or "").strip()
    if not USERNAME_MIN_LENGTH <= len(name) <= USERNAME_MAX_LENGTH:
        raise InvalidUsernameError(
            f"Username must be between {USERNAME_MIN_LENGTH}-"
            f"{USERNAME_MAX_LENGTH} characters",
        )
    return name
