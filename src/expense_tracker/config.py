"""Application configuration."""

import os

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_tracker.domain.errors import ConfigurationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    session_secret: str
    host: str = "0.0.0.0"
    port: int = 5002
    environment: str = _ENVIRONMENT
    session_ttl_seconds: int = 60 * 60 * 24
    session_cookie_name: str = "expense_tracker_sid"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def secure_cookies(self) -> bool:
        return self.environment == "production"


def load_settings() -> Settings:
    """Load settings, converting missing or invalid values to ConfigurationError."""
    try:
        return Settings()
    except ValidationError as exc:
        fields = sorted(
            ".".join(str(part) for part in error["loc"]) for error in exc.errors()
        )
        raise ConfigurationError(
            f"Missing or invalid configuration: {', '.join(fields)}"
        ) from exc
