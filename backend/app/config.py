"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Generation provider
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    generation_timeout_seconds: float = 60.0
    generation_max_tokens: int = 8192
    allow_stub_generation: bool = True

    # Persistence
    database_url: str | None = None
    redis_url: str | None = None
    storage_key: str = "triparchitect_trip_data"

    # UI
    backend_url: str = "http://localhost:8000"
    recommendation_page_size: int = 8


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
