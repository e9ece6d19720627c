"""Application configuration via Pydantic Settings."""

from typing import List
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./vibe_awards.db"
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 30.0
    SQLITE_IMMEDIATE_TRANSACTIONS: bool = True

    @model_validator(mode="after")
    def fix_database_url(self) -> "Settings":
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://"""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            self.DATABASE_URL = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            self.DATABASE_URL = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return self

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    SEED_SAMPLE_DATA: bool = False

    # Auth / JWT
    JWT_SECRET_KEY: str = "change-me-in-production-use-a-random-secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Rate limiting (per client IP, applied to /api/*)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Honour X-Forwarded-For when running behind a reverse proxy
    TRUST_PROXY_HEADERS: bool = False

    # Frontend
    FRONTEND_URL: str = "http://localhost:3001"
    CORS_ORIGINS: str = ""  # Comma-separated list of extra origins

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS into a list, always including FRONTEND_URL.

        Returns:
            List of allowed origin strings
        """
        origins = [self.FRONTEND_URL]
        if self.CORS_ORIGINS:
            origins.extend(o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip())
        return origins


settings = Settings()
