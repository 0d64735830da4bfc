"""SQL Identity Provider — guest players resolved by id or registered by name.

Invariants:
    - resolve_owner is a pure existence check (no side effects)
    - register_guest returns the existing player for a username or creates one
    - Usernames normalized by core/enforce_username before any query
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.core.domain_types import OwnerId
from aramaic_quiz.core.enforce_username import normalize_username
from aramaic_quiz.core.errors import ConcurrentModificationError
from aramaic_quiz.infrastructure.database import bounded_store_call
from aramaic_quiz.models.player import Player

logger = logging.getLogger(__name__)


class SqlIdentityProvider:
    """IdentityProvider over the players table."""

    def __init__(self, db: AsyncSession, timeout_seconds: float = 5.0):
        self._db = db
        self._timeout = timeout_seconds

    async def resolve_owner(self, owner_id: OwnerId) -> bool:
        return await self.get_player(owner_id) is not None

    async def get_player(self, owner_id: OwnerId) -> Player | None:
        result = await bounded_store_call(
            self._db.execute(
                select(Player)
                .where(Player.id == owner_id)
                .execution_options(populate_existing=True),
            ),
            "get_player", self._timeout,
        )
        return result.scalar_one_or_none()

    async def _find_by_username(self, username: str) -> Player | None:
        result = await bounded_store_call(
            self._db.execute(select(Player).where(Player.username == username)),
            "find_player_by_username", self._timeout,
        )
        return result.scalar_one_or_none()

    async def register_guest(self, raw_username: str) -> Player:
        """Find-or-create a guest player. Commits when a player is created."""
        username = normalize_username(raw_username)
        player = await self._find_by_username(username)
        if player:
            return player

        player = Player(username=username)
        self._db.add(player)
        try:
            await bounded_store_call(self._db.commit(), "register_guest", self._timeout)
        except ConcurrentModificationError:
            # Same name registered concurrently; the other insert won.
            await bounded_store_call(self._db.rollback(), "rollback", self._timeout)
            player = await self._find_by_username(username)
            if player is None:
                raise
            return player
        logger.info("Guest player registered", extra={"owner_id": player.id})
        return player
