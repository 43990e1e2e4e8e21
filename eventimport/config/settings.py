"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Supabase
    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_service_role_key: str = Field(default="", alias="SUPABASE_SERVICE_ROLE_KEY")

    # Fetcher
    import_user_agent: str = Field(default=BROWSER_USER_AGENT, alias="IMPORT_USER_AGENT")
    import_accept_language: str = Field(default="en-US,en;q=0.5", alias="IMPORT_ACCEPT_LANGUAGE")
    import_request_timeout: float = Field(default=30.0, alias="IMPORT_REQUEST_TIMEOUT")

    # Platforms that reject automated fetches: domain -> display name
    import_blocked_platforms: dict[str, str] = Field(
        default_factory=lambda: {
            "facebook.com": "Facebook",
            "fb.com": "Facebook",
            "instagram.com": "Instagram",
            "tixr.com": "Tixr",
        },
        alias="IMPORT_BLOCKED_PLATFORMS",
    )

    # Commit writer
    match_similarity_threshold: float = Field(
        default=0.85, ge=0.0, le=1.0, alias="MATCH_SIMILARITY_THRESHOLD"
    )
    default_venue_country: str = Field(default="USA", alias="DEFAULT_VENUE_COUNTRY")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(default="console", alias="LOG_FORMAT")
    log_file: str | None = Field(default=None, alias="LOG_FILE")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )
    dry_run: bool = Field(default=False, alias="DRY_RUN")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
