"""Configuration package."""

from vadi_hisaab.config.settings import (
    ApiSettings,
    AppSettings,
    SessionSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "SessionSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
