"""Question Schemas — public question payload (never includes the answer)."""

from uuid import UUID

from pydantic import BaseModel


class QuestionResponse(BaseModel):
    id: UUID
    aramaic: str
    hebrew: str
    options: list[str]
    audio_file: str | None = None
    category: str
    difficulty: str
