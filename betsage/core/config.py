"""
Configuration Management for BetSage.

Uses pydantic-settings for robust environment variable loading and validation.
"""

from typing import List, Optional
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Settings.

    Loads configuration from environment variables and .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # App Info
    APP_NAME: str = "BetSage Sports Prediction Agent"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"
    STATIC_DIR: str = "public"

    # The Odds API
    ODDS_API_KEY: Optional[str] = None
    ODDS_API_BASE_URL: str = "https://api.the-odds-api.com/v4"
    ODDS_API_REGION: str = "us"
    ODDS_API_TIMEOUT: float = 30.0

    # Anthropic Messages API
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_API_URL: str = "https://api.anthropic.com/v1/messages"
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_MAX_TOKENS: int = 4096
    ANTHROPIC_TIMEOUT: float = 120.0

    # Request gating and caching
    RATE_LIMIT_MAX_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: int = 3600
    CACHE_TTL_SECONDS: int = 300
    GAME_LIMIT: int = 10
    ROSTER_SPORTS: str = "cbb"

    # Optional persistence
    DATABASE_URL: Optional[str] = None
    RECORDER_TIMEOUT: float = 10.0

    @computed_field
    @property
    def ASYNC_DATABASE_URL(self) -> Optional[str]:
        """DATABASE_URL rewritten for an async driver, or None when unset."""
        if not self.DATABASE_URL:
            return None
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql+asyncpg://", 1)
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.DATABASE_URL

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def roster_sports(self) -> List[str]:
        return [s.strip().lower() for s in self.ROSTER_SPORTS.split(",") if s.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
