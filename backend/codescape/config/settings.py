"""
Application Settings using Pydantic Settings
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = Field(default="CodeScape Backend")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")

    # Backend Server
    BACKEND_HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    # Frontend (single allowed CORS origin)
    FRONTEND_URL: str = Field(default="http://localhost:8000")

    # Database
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./codescape.db")

    @computed_field  # type: ignore[misc]
    @property
    def DATABASE_KIND(self) -> str:
        """Short label of the configured database backend."""
        return self.DATABASE_URL.split(":", 1)[0].split("+", 1)[0]

    # Rate limiting (fixed window per client address)
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=15 * 60)
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=100)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")

    @property
    def CORS_ORIGINS(self) -> list[str]:
        return [self.FRONTEND_URL]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
