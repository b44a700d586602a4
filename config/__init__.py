"""Configuration module for the quarter simulation."""

from config.settings import (
    EngineSettings,
    GameSettings,
    LogSettings,
    Settings,
    get_settings,
    setup_logging,
)

__all__ = [
    "EngineSettings",
    "GameSettings",
    "LogSettings",
    "Settings",
    "get_settings",
    "setup_logging",
]
