"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str = ""
    host: str = "0.0.0.0"
    port: int = 3000
    public_origin: str | None = None
    static_dir: Path = Path("public")
    artifact_dir: Path = Path("public/images")
    artifact_url_prefix: str = "/images"
    description_model: str = "gpt-4o-mini"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    download_timeout_seconds: float = 30.0
    pairing_session_ttl_seconds: int | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_url_prefix(raw: str) -> str:
    """Return a URL prefix with a single leading slash and no trailing slash."""
    cleaned = raw.strip().strip("/")
    if not cleaned:
        return ""
    return f"/{cleaned}"
