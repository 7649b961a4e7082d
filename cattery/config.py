"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every field is overridable by an environment variable of the same name
      (case-insensitive) or a .env file
    - database_url always names an async driver (asyncpg or aiosqlite)
    - get_settings() is cached (lru_cache): one Settings instance per process

Design Decisions:
    - Defaults target the docker-compose Postgres so `uvicorn cattery.main:app`
      works without a .env
    - auto_create_schema is for local runs and demos; deployed databases are
      migrated with alembic
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Cattery settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    environment: Literal["local", "development", "production", "test"] = "local"
    port: int = 3000

    # Persistence
    database_url: str = "postgresql+asyncpg://cattery:cattery@db:5432/cattery"
    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_echo: bool = False
    auto_create_schema: bool = False

    # HTTP
    cors_origins: list[str] = ["http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """postgresql:// and postgres:// URLs are rewritten for asyncpg."""
        if isinstance(v, str):
            for prefix in ("postgresql://", "postgres://"):
                if v.startswith(prefix):
                    return "postgresql+asyncpg://" + v[len(prefix):]
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
