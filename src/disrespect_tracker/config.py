"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Disrespect Tracker API"
    debug: bool = False
    secret_key: str  # Required, no default
    app_url: str = "http://localhost:3000"

    # Database
    database_url: str = "sqlite+aiosqlite:///./disrespect_tracker.db"
    create_tables_on_startup: bool = False

    # Week bucketing
    week_timezone: str = "UTC"
    default_weeks_back: int = 8

    # JWT Authentication
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 7

    # Invites and password resets
    invite_expire_days: int = 7
    password_reset_expire_minutes: int = 60

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Validate that secret_key is secure."""
        if not v:
            raise ValueError("SECRET_KEY is required")

        # In production mode, ensure secret key is strong
        debug = info.data.get("debug", False)
        if not debug:
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production mode")
            if v in ("change-me-in-production", "secret", "password", "changeme"):
                raise ValueError("SECRET_KEY must not be a common weak value")

        return v

    @field_validator("week_timezone")
    @classmethod
    def validate_week_timezone(cls, v: str) -> str:
        """Validate that week_timezone names a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"WEEK_TIMEZONE '{v}' is not a known time zone") from e
        return v

    @field_validator("default_weeks_back")
    @classmethod
    def validate_default_weeks_back(cls, v: int) -> int:
        """Validate the default lookback is not negative."""
        if v < 0:
            raise ValueError("DEFAULT_WEEKS_BACK must not be negative")
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """Time zone used to decide where a week starts."""
        return ZoneInfo(self.week_timezone)

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if self.database_url.startswith("sqlite") and not self.debug:
            warnings.append("DATABASE_URL points at SQLite - use a server database in production")

        if "localhost" in self.app_url and not self.debug:
            warnings.append("APP_URL points at localhost - invite and reset links will not work")

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
