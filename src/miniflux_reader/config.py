"""Configuration management for Miniflux Reader."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Miniflux API Configuration
    miniflux_api_url: str
    miniflux_api_key: str

    # Optional settings with defaults
    request_timeout: int = 30
    log_level: str = "INFO"

    # HTTP Server Configuration
    host: str = "0.0.0.0"
    port: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("miniflux_api_url", "miniflux_api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings loaded from environment.

    Raises:
        ValidationError: If MINIFLUX_API_URL or MINIFLUX_API_KEY is missing.
    """
    # pydantic-settings loads required fields from environment variables
    return Settings()  # type: ignore[call-arg]


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
