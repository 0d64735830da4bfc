"""Player Routes — guest login by display name and profile lookup.

Invariants:
    - Guest login is find-or-create by username (no passwords, no tokens)
    - The returned player id is the X-Player-Id for all game routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.api.dependencies import get_owner_id
from aramaic_quiz.config import get_settings
from aramaic_quiz.core.domain_types import OwnerId
from aramaic_quiz.core.errors import UnknownOwnerError
from aramaic_quiz.core.player_titles import title_for_score
from aramaic_quiz.infrastructure.database import get_db
from aramaic_quiz.infrastructure.identity import SqlIdentityProvider
from aramaic_quiz.models.player import Player
from aramaic_quiz.schemas.player import GuestLogin, PlayerResponse

router = APIRouter(prefix="/api/v1/players", tags=["players"])


def _to_response(player: Player) -> PlayerResponse:
    return PlayerResponse(
        id=player.id,
        username=player.username,
        games_played=player.games_played,
        correct_answers=player.correct_answers,
        high_score=player.high_score,
        last_score=player.last_score,
        title=title_for_score(player.high_score),
        created_at=player.created_at,
    )


@router.post("/guest", response_model=PlayerResponse)
async def guest_login(body: GuestLogin, db: AsyncSession = Depends(get_db)):
    """Log in as a guest — creates the player on first use of a name."""
    identity = SqlIdentityProvider(db, get_settings().store_timeout_seconds)
    player = await identity.register_guest(body.username)
    return _to_response(player)


@router.get("/me", response_model=PlayerResponse)
async def get_me(
    owner_id: OwnerId = Depends(get_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Caller's profile with cumulative stats and rank title."""
    identity = SqlIdentityProvider(db, get_settings().store_timeout_seconds)
    player = await identity.get_player(owner_id)
    if player is None:
        raise UnknownOwnerError(str(owner_id))
    return _to_response(player)
