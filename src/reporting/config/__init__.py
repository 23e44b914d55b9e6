"""Configuration management module.

This module provides:
- Environment-based configuration with validation
- Backend and display settings groups
- Cached settings access via get_settings()
"""

from .settings import (
    BackendSettings,
    DisplaySettings,
    Environment,
    LogFormat,
    LogLevel,
    Settings,
    get_settings,
)

__all__ = [
    # Main settings
    "Settings",
    "get_settings",
    # Enums
    "Environment",
    "LogLevel",
    "LogFormat",
    # Component settings
    "BackendSettings",
    "DisplaySettings",
]
