"""Application settings parsed from environment variables and defaults."""

import json
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_SESSION_SECRET = "change-me"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "VOD Hub API"
    environment: str = "development"
    api_prefix: str = "/api"

    database_url: str = "sqlite+aiosqlite:///./vodhub.db"

    admin_password: str = DEFAULT_ADMIN_PASSWORD
    session_secret_key: str = DEFAULT_SESSION_SECRET
    session_algorithm: str = "HS256"
    session_expires_minutes: int = 60 * 24 * 7

    provider_search_timeout_seconds: float = 10.0
    provider_detail_timeout_seconds: float = 15.0
    provider_user_agent: str = DEFAULT_USER_AGENT

    log_level: str = "INFO"
    cors_origins: list[str] | str = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, value: str | list[str] | None) -> list[str]:
        """Normalize CORS origins from JSON, CSV, or list inputs."""
        if isinstance(value, list):
            cleaned = [origin.strip() for origin in value if isinstance(origin, str) and origin.strip()]
            return cleaned or DEFAULT_CORS_ORIGINS.copy()
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return DEFAULT_CORS_ORIGINS.copy()
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                cleaned = [str(origin).strip() for origin in parsed if str(origin).strip()]
                if cleaned:
                    return cleaned
            origins = [origin.strip() for origin in stripped.split(",") if origin.strip()]
            if origins:
                return origins
        return DEFAULT_CORS_ORIGINS.copy()

    @field_validator("provider_search_timeout_seconds", "provider_detail_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        """Reject non-positive provider timeouts."""
        if value <= 0:
            raise ValueError("Provider timeouts must be greater than zero")
        return value

    @model_validator(mode="after")
    def _validate_production_secrets(self) -> "Settings":
        """Refuse to run production with the shipped password or signing key."""
        if self.environment.lower() != "production":
            return self
        if self.admin_password == DEFAULT_ADMIN_PASSWORD:
            raise ValueError("ADMIN_PASSWORD must be changed from the default in production")
        if self.session_secret_key == DEFAULT_SESSION_SECRET:
            raise ValueError("SESSION_SECRET_KEY must be set in production")
        return self

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings to avoid re-parsing environment variables."""
    return Settings()


settings = get_settings()
