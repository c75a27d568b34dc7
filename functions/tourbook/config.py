"""
Configuration and settings for the tour booking backend.

Field names double as environment variable names (case-insensitive), e.g.
``DATABASE_URL`` or ``S3_BUCKET``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # S3-compatible storage (R2, COS, AWS)
    s3_endpoint: Optional[str] = Field(default=None)
    s3_region: Optional[str] = Field(default=None)
    s3_bucket: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    # Admin session cookie
    session_secret: str = Field(default="change-me-in-production")
    session_cookie_name: str = Field(default="admin_session")
    session_max_age_seconds: int = Field(default=60 * 60 * 24 * 7)
    session_cookie_secure: bool = Field(default=True)

    # Booking hand-off
    whatsapp_number: str = Field(default="966500000000")
    currency: str = Field(default="SAR")

    cors_origins: list[str] = Field(default=["*"])
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
