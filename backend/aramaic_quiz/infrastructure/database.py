"""Database Session Manager — async connection pool, rollback, bounded store calls.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - SQLAlchemy exceptions mapped to QuizError subclasses (core/errors.py):
      IntegrityError -> ConcurrentModificationError, everything else -> StoreUnavailableError
    - bounded_store_call never hangs: asyncio timeout -> StoreUnavailableError

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - IntegrityError is a conflict, not an outage: the only constraints gameplay can
      trip are the one-active-session index and the game_results primary key,
      both of which mean "someone else wrote first"
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, TypeVar

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from aramaic_quiz.core.errors import (
    ConcurrentModificationError, StoreUnavailableError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded_store_call(
    call: Awaitable[T], operation: str, timeout: float,
) -> T:
    """Await a store call with a timeout, mapping failures to QuizErrors."""
    try:
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError:
        logger.error(f"Store {operation} timed out after {timeout}s")
        raise StoreUnavailableError(f"timed out after {timeout}s", operation)
    except IntegrityError as e:
        logger.warning(f"Store {operation} conflict: {e.orig}")
        raise ConcurrentModificationError(
            f"Concurrent write detected during {operation}",
        )
    except OperationalError as e:
        logger.error(f"DB operational error during {operation}: {e}")
        raise StoreUnavailableError("Connection or operational error", operation)
    except DBAPIError as e:
        logger.error(f"DB driver error during {operation}: {e}")
        raise StoreUnavailableError("Database driver error", operation)
    except SQLAlchemyError as e:
        logger.error(f"SQLAlchemy error during {operation}: {e}")
        raise StoreUnavailableError("Database operation failed", operation)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(self, database_url: str, **pool_options):
        """pool_options come from Settings.pool_options() (empty for SQLite)."""
        if pool_options:
            pool_options.setdefault("pool_recycle", 3600)
        self.engine = create_async_engine(
            database_url, pool_pre_ping=True, **pool_options,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f"DB integrity error: {e}")
            raise ConcurrentModificationError("Integrity constraint violated")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise StoreUnavailableError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise StoreUnavailableError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise StoreUnavailableError("Database operation failed", "unknown")
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for the readiness check)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
