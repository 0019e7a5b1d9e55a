"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from algorhythm.config import Environment, Settings


class TestSettings:
    """Test Settings model and validation."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.environment == Environment.DEV
        assert settings.debug is True  # Auto-set from DEV environment
        assert settings.port == 3000
        assert settings.viewer_baseline == 42
        assert settings.database_url.startswith("sqlite+aiosqlite")
        assert settings.is_sqlite is True

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert Settings(_env_file=None).port == 8080

    def test_invalid_port_rejected(self):
        with pytest.raises(ValidationError):
            Settings(port=70000)

    def test_negative_baseline_rejected(self):
        with pytest.raises(ValidationError):
            Settings(viewer_baseline=-1)

    def test_environment_flags(self):
        assert Settings(environment=Environment.TEST).is_dev is True
        prod = Settings(environment=Environment.PROD)
        assert prod.is_prod is True
        assert prod.is_dev is False
        assert prod.debug is False

    def test_postgres_url_is_not_sqlite(self):
        settings = Settings(database_url="postgresql+asyncpg://app:pw@db:5432/algorhythm")
        assert settings.is_sqlite is False
