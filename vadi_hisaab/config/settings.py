"""
Configuration Management for Vadi Hisaab

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The core itself is pure; only the persistence client and the session
token store need anything from the environment.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Remote persistence service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VADI_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the farm ledger API (including the /api prefix)"
    )
    timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=120,
        description="Fixed timeout for every round trip. Calls are never retried."
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are joined as '/crops', so the base must not end in '/'."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"API base URL must start with http:// or https://, got: {v}")
        return v.rstrip("/")


class SessionSettings(BaseSettings):
    """Where the opaque session credential is kept between runs."""

    model_config = SettingsConfigDict(
        env_prefix="VADI_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    token_path: Path = Field(
        default=Path.home() / ".vadi_hisaab" / "token",
        description="File holding the bearer token until logout"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # List sizes used when re-fetching after a change
    crop_page_size: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Crops fetched per page"
    )
    expense_page_size: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Expenses fetched per page (a crop's ledger usually fits in one)"
    )
    income_page_size: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Incomes fetched per page"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def session(self) -> SessionSettings:
        return SessionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("api", "session", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
