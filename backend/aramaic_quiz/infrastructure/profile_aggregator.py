"""SQL Profile Aggregator — rolls finished sessions into player stats, once each.

Invariants:
    - A session id is recorded at most once (game_results primary key)
    - Redelivery for an already-recorded session id is a no-op returning False
    - Stat updates are single UPDATE expressions (no read-modify-write on players)
    - Runs inside the caller's transaction: commits with the finalizing session write
    - Ranking order is high_score desc, then correct_answers desc; ties share a rank

Design Decisions:
    - Ledger row + counter update rather than recomputing from game_sessions:
      constant cost per finalize, and the ledger doubles as the idempotency key
"""

import logging

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.core.domain_types import (
    SessionId, OwnerId, LEADERBOARD_MAX_SIZE,
)
from aramaic_quiz.infrastructure.database import bounded_store_call
from aramaic_quiz.models.game_result import GameResult
from aramaic_quiz.models.player import Player

logger = logging.getLogger(__name__)


class SqlProfileAggregator:
    """ProfileAggregator backed by players + game_results."""

    def __init__(self, db: AsyncSession, timeout_seconds: float = 5.0):
        self._db = db
        self._timeout = timeout_seconds

    async def record_game_result(
        self,
        session_id: SessionId,
        owner_id: OwnerId,
        correct_answers: int,
        final_score: int,
    ) -> bool:
        existing = await bounded_store_call(
            self._db.execute(
                select(GameResult.session_id).where(
                    GameResult.session_id == session_id,
                ),
            ),
            "find_game_result", self._timeout,
        )
        if existing.scalar_one_or_none() is not None:
            logger.info(
                "Game result already recorded, skipping",
                extra={"session_id": session_id, "owner_id": owner_id},
            )
            return False

        self._db.add(GameResult(
            session_id=session_id,
            owner_id=owner_id,
            correct_answers=correct_answers,
            final_score=final_score,
        ))
        await bounded_store_call(
            self._db.execute(
                update(Player)
                .where(Player.id == owner_id)
                .values(
                    games_played=Player.games_played + 1,
                    correct_answers=Player.correct_answers + correct_answers,
                    high_score=case(
                        (Player.high_score < final_score, final_score),
                        else_=Player.high_score,
                    ),
                    last_score=final_score,
                )
                .execution_options(synchronize_session=False),
            ),
            "update_player_stats", self._timeout,
        )
        await bounded_store_call(
            self._db.flush(), "record_game_result", self._timeout,
        )
        logger.info(
            f"Recorded game result: score={final_score} correct={correct_answers}",
            extra={"session_id": session_id, "owner_id": owner_id},
        )
        return True

    async def rank_of(self, player: Player) -> int:
        """1 + number of players strictly ahead of `player`."""
        ahead = or_(
            Player.high_score > player.high_score,
            and_(
                Player.high_score == player.high_score,
                Player.correct_answers > player.correct_answers,
            ),
        )
        result = await bounded_store_call(
            self._db.execute(
                select(func.count()).select_from(Player).where(ahead),
            ),
            "rank_of", self._timeout,
        )
        return result.scalar_one() + 1

    async def top_players(self, count: int) -> list[Player]:
        """Best players first; count is clamped to 1..LEADERBOARD_MAX_SIZE."""
        limit = max(1, min(count, LEADERBOARD_MAX_SIZE))
        result = await bounded_store_call(
            self._db.execute(
                select(Player)
                .order_by(
                    Player.high_score.desc(),
                    Player.correct_answers.desc(),
                    Player.created_at,
                )
                .limit(limit),
            ),
            "top_players", self._timeout,
        )
        return list(result.scalars().all())
