"""Quiz Settings — one pydantic-settings object read from env / .env.

Invariants:
    - store_timeout_seconds > 0: every store call is bounded
    - session_max_retries >= 0 and backoff delays never exceed session_retry_max_delay_ms
    - database_url always names an async driver (postgresql+asyncpg or sqlite+aiosqlite)
    - get_settings() returns the same instance for the life of the process

Design Decisions:
    - Pool options derived here, not in database.py: SQLite has no QueuePool knobs
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the quiz API."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://quiz:quiz@db:5432/aramaic_quiz"
    database_pool_size: int = Field(default=20, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)

    # Session store / engine
    store_timeout_seconds: float = Field(default=5.0, gt=0)
    session_max_retries: int = Field(default=3, ge=0)
    session_retry_base_delay_ms: int = Field(default=20, ge=0)
    session_retry_max_delay_ms: int = Field(default=500, ge=0)

    # API
    cors_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// (or postgres://) URLs."""
        if not isinstance(v, str):
            return v
        for prefix in ("postgresql://", "postgres://"):
            if v.startswith(prefix):
                return "postgresql+asyncpg://" + v[len(prefix):]
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def pool_options(self) -> dict:
        """Keyword arguments for DatabaseSessionManager."""
        if self.is_sqlite:
            return {}
        return {
            "pool_size": self.database_pool_size,
            "max_overflow": self.database_max_overflow,
            "pool_timeout": self.store_timeout_seconds,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
