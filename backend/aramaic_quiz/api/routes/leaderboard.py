"""Leaderboard Routes — a player's rank and the top players by high score.

Invariants:
    - Order is high_score desc, then correct_answers desc (SqlProfileAggregator)
    - /top/{count} never returns more than LEADERBOARD_MAX_SIZE entries
    - score in every payload is the player's high_score
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.config import get_settings
from aramaic_quiz.core.domain_types import OwnerId
from aramaic_quiz.core.errors import PlayerNotFoundError
from aramaic_quiz.core.player_titles import title_for_score
from aramaic_quiz.infrastructure.database import get_db
from aramaic_quiz.infrastructure.identity import SqlIdentityProvider
from aramaic_quiz.infrastructure.profile_aggregator import SqlProfileAggregator
from aramaic_quiz.schemas.leaderboard import LeaderboardEntry, RankResponse

router = APIRouter(prefix="/api/v1/leaderboard", tags=["leaderboard"])


@router.get("/rank/{player_id}", response_model=RankResponse)
async def player_rank(player_id: UUID, db: AsyncSession = Depends(get_db)):
    timeout = get_settings().store_timeout_seconds
    player = await SqlIdentityProvider(db, timeout).get_player(OwnerId(player_id))
    if player is None:
        raise PlayerNotFoundError(str(player_id))
    rank = await SqlProfileAggregator(db, timeout).rank_of(player)
    return RankResponse(
        rank=rank,
        username=player.username,
        score=player.high_score,
        title=title_for_score(player.high_score),
    )


@router.get("/top/{count}", response_model=list[LeaderboardEntry])
async def top_players(
    count: int = Path(ge=1),
    db: AsyncSession = Depends(get_db),
):
    """Top `count` players, capped at 100."""
    aggregator = SqlProfileAggregator(db, get_settings().store_timeout_seconds)
    players = await aggregator.top_players(count)
    return [
        LeaderboardEntry(
            rank=position,
            username=p.username,
            score=p.high_score,
            correct_answers=p.correct_answers,
            title=title_for_score(p.high_score),
        )
        for position, p in enumerate(players, start=1)
    ]
