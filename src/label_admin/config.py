"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_username: str = "admin"
    admin_password: str = "P@ssw0rd"
    api_base_url: str = "http://localhost:8000"
    image_max_file_bytes: int = 5 * 1024 * 1024
    image_max_dimension: int = 800
    image_max_payload_chars: int = 800_000
    image_quality: float = 0.7
    image_fallback_quality: float = 0.5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
