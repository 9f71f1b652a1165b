"""Application configuration using pydantic-settings."""

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="NODEFLOW_",
        extra="ignore",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: Literal["debug", "info", "warning", "error"] = "info"

    # Application settings
    app_name: str = "Nodeflow"
    app_version: str = "0.1.0"
    debug: bool = False

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./nodeflow.db"
    max_runs_per_workflow: int = 100

    # Execution settings
    http_timeout: float = 30.0
    llm_timeout: float = 120.0

    # Realtime subscription tokens
    realtime_secret: str = "nodeflow-dev-realtime-secret-change-me-in-production"
    realtime_token_ttl: int = 3600

    # AI/LLM credentials (unprefixed env vars take precedence, see provider_key)
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    google_generative_ai_api_key: str | None = None

    def provider_key(self, env_name: str) -> str | None:
        """Return a provider credential, checking the raw env var first."""
        value = os.environ.get(env_name)
        if value:
            return value
        return getattr(self, env_name.lower(), None) or None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
