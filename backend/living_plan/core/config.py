"""
Application configuration using Pydantic Settings.

Only the local SQLite environment is implemented.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./living_plan.db"

    # ===========================================
    # Auth
    # ===========================================
    # Authentication is owned by the surrounding application; only the
    # mock provider ships with this service.
    AUTH_PROVIDER: Literal["mock"] = "mock"
    AUTH_REQUIRED: bool = False

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # ===========================================
    # Living Plan
    # ===========================================
    # Working hours that make up one calendar day when a task only
    # carries duration_hours.
    HOURS_PER_DAY: int = Field(default=8, ge=1, le=24)

    # Used only at the HTTP edge to derive "today" when the caller omits it
    DEFAULT_TIMEZONE: str = "UTC"

    # Upper bound for a single atomic plan commit
    COMMIT_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
