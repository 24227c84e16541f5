"""Application settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for fetching GitHub events."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: str | None = None
    http_timeout: float = 10.0

    # Exponential backoff schedule for transient failures
    backoff_initial_interval: float = 0.5
    backoff_multiplier: float = 1.5
    backoff_max_interval: float = 60.0
    backoff_max_elapsed_time: float = 900.0

    retry_server_errors: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
