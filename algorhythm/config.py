"""
Runtime settings for the AlgoRhythm server.

Read from environment variables (case-insensitive) and an optional .env
file. PORT, DATABASE_URL and VIEWER_BASELINE are the ones usually set.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Application
    # ------------------------------------------------------------------ #
    environment: Environment = Environment.DEV
    debug: bool = False

    # ------------------------------------------------------------------ #
    # Server
    # ------------------------------------------------------------------ #
    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="HTTP port, shared by the REST API and the live WebSocket channel",
    )
    static_dir: str = Field(
        default="public",
        description="Directory with the front-end bundle. Served at / when it exists.",
    )

    # ------------------------------------------------------------------ #
    # Database
    # ------------------------------------------------------------------ #
    database_url: str = Field(
        default="sqlite+aiosqlite:///./algorhythm.db",
        description="Async SQLAlchemy database URL",
    )
    db_echo_sql: bool = False  # Set True for SQL query logging in dev

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    cors_allowed_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins. The demo front-end may be hosted anywhere.",
    )

    # ------------------------------------------------------------------ #
    # Live updates
    # ------------------------------------------------------------------ #
    viewer_baseline: int = Field(
        default=42,
        ge=0,
        description="Starting value of the cosmetic viewer counter",
    )

    # ------------------------------------------------------------------ #
    # Derived / Computed
    # ------------------------------------------------------------------ #
    @model_validator(mode="after")
    def _set_debug_from_env(self) -> Settings:
        if self.environment == Environment.DEV:
            self.debug = True
        return self

    @property
    def is_dev(self) -> bool:
        return self.environment in (Environment.DEV, Environment.TEST)

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PROD

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings for the current process, parsed once."""
    return Settings()
