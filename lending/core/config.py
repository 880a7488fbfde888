"""Core application configuration and settings.

Handles environment variables, the repository backend choice and the
Redis connection used by the persistent repository.
"""
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings


# Load environment variables
ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT / ".env", override=False)

REPOSITORY_BACKENDS = ("memory", "redis")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    # Persistence
    repository_backend: str = Field(default="memory", alias="REPOSITORY_BACKEND")

    # Redis Configuration
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    redis_db: int = Field(default=0, alias="REDIS_DB")
    redis_key_prefix: str = Field(default="lending:", alias="REDIS_KEY_PREFIX")

    # API Settings
    api_prefix: str = Field(default="", alias="API_PREFIX")
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ],
        alias="CORS_ORIGINS"
    )

    class Config:
        case_sensitive = False
        env_file = ".env"
        populate_by_name = True
        extra = "ignore"

    def validate_required_settings(self):
        """Validate that settings hold supported values."""
        if self.repository_backend not in REPOSITORY_BACKENDS:
            raise ValueError(
                f"REPOSITORY_BACKEND must be one of {', '.join(REPOSITORY_BACKENDS)}, "
                f"got '{self.repository_backend}'."
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'."
            )
        if self.environment == "production" and self.repository_backend == "memory":
            raise ValueError(
                "REPOSITORY_BACKEND=memory loses every snapshot on restart; "
                "use redis in production."
            )


# Global settings instance
settings = Settings()


# Validate settings on module import (only in non-test environments)
if settings.environment != "test":
    try:
        settings.validate_required_settings()
    except ValueError as e:
        print(f"Configuration Error: {e}")
        # Don't raise in development to allow partial setup
        if settings.environment == "production":
            raise
