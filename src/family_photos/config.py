"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "photos"
    signed_url_ttl_seconds: int = 3600
    max_concurrent_uploads: int = 4
    default_timezone: str = "UTC"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_tag_list(raw: str | None) -> list[str]:
    """Split a comma-separated tag field into raw tag values."""
    if raw is None:
        return []
    return [chunk for chunk in raw.split(",") if chunk.strip()]
