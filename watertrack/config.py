"""
Configuration and settings for the WaterTrack backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Database (any SQLAlchemy URL; unset means in-memory)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="WATERTRACK_USE_IN_MEMORY_BACKENDS"
    )

    # Auth
    jwt_secret: str = Field(default="dev-secret-change")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60, ge=1)
    password_schemes: list[str] = Field(default_factory=lambda: ["pbkdf2_sha256"])

    # Usage targets
    daily_target_litres: float = Field(default=50.0, gt=0)
    recent_logs_limit: int = Field(default=10, ge=1, le=100)

    # Load the default lesson catalogue into a fresh in-memory store
    seed_lessons_on_startup: bool = Field(default=False)

    # HTTP
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"]
    )
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
