"""Settings — environment parsing and database URL normalisation."""

import pytest

from cattery.config import Settings


@pytest.mark.parametrize("raw", [
    "postgresql://u:p@host:5432/cats",
    "postgres://u:p@host:5432/cats",
])
def test_postgres_urls_use_asyncpg(raw):
    settings = Settings(database_url=raw)
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/cats"


def test_async_urls_are_kept():
    url = "sqlite+aiosqlite:///:memory:"
    assert Settings(database_url=url).database_url == url


def test_environment_from_env(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("DATABASE_POOL_SIZE", "5")
    settings = Settings()
    assert settings.is_production
    assert settings.database_pool_size == 5


def test_invalid_log_format_rejected(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "xml")
    with pytest.raises(ValueError):
        Settings()
