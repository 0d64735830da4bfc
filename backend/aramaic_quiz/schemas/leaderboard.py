"""Leaderboard Schemas — rank lookup and top-N entries."""

from pydantic import BaseModel


class RankResponse(BaseModel):
    rank: int
    username: str
    score: int
    title: str


class LeaderboardEntry(BaseModel):
    rank: int
    username: str
    score: int
    correct_answers: int
    title: str
