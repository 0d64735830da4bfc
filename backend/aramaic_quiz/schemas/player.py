"""Player Schemas — guest login and profile payloads."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from aramaic_quiz.core.domain_types import USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH


class GuestLogin(BaseModel):
    """Guest login — validates username length and whitespace."""
    username: str = Field(
        min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH,
    )

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < USERNAME_MIN_LENGTH:
            raise ValueError("username cannot be empty or whitespace")
        return v


class PlayerResponse(BaseModel):
    id: UUID
    username: str
    games_played: int
    correct_answers: int
    high_score: int
    last_score: int
    title: str
    created_at: datetime
