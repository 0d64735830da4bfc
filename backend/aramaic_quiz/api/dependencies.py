"""Route Dependencies — caller identity and per-request engine wiring.

Invariants:
    - The caller's identity is the X-Player-Id header (guest player UUID)
    - One SessionEngine per request, bound to the request's AsyncSession
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from aramaic_quiz.config import get_settings
from aramaic_quiz.core.domain_types import OwnerId
from aramaic_quiz.infrastructure.database import get_db
from aramaic_quiz.services.session_engine import SessionEngine, build_session_engine


async def get_owner_id(x_player_id: UUID = Header(...)) -> OwnerId:
    return OwnerId(x_player_id)


async def get_session_engine(
    db: AsyncSession = Depends(get_db),
) -> SessionEngine:
    return build_session_engine(db, get_settings())
