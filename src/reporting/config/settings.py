"""Configuration management with Pydantic Settings.

Environment variables are loaded from:
1. Environment variables (highest priority)
2. .env file (development)
3. Defaults (lowest priority)
"""

from enum import Enum
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Logging format."""

    JSON = "json"
    TEXT = "text"


class BackendSettings(BaseSettings):
    """Reporting backend API configuration."""

    model_config = SettingsConfigDict(env_prefix="REPORTING_BACKEND_")

    api_base_url: str = Field(
        default="http://localhost:5601/api/reporting",
        description="Base URL of the reporting REST API",
    )
    request_timeout_seconds: float = Field(default=10.0, description="Request timeout")
    connect_timeout_seconds: float = Field(default=5.0, description="Connect timeout")

    @field_validator("request_timeout_seconds", "connect_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure timeouts are positive."""
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v


class DisplaySettings(BaseSettings):
    """Presentation-facing settings for the details view."""

    model_config = SettingsConfigDict(env_prefix="REPORTING_DISPLAY_")

    timezone: str = Field(default="UTC", description="Timezone for rendered timestamps")
    app_route_prefix: str = Field(
        default="opendistro_kibana_reports#/",
        description="Route prefix handed to the navigator",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """Resolved display timezone."""
        return ZoneInfo(self.timezone)


class Settings(BaseSettings):
    """Main application settings.

    All settings can be overridden via environment variables.
    For nested settings, use the appropriate prefix (e.g., REPORTING_BACKEND_API_BASE_URL).
    """

    model_config = SettingsConfigDict(
        env_prefix="REPORTING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="report-definition-console", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment",
    )

    # Logging configuration
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="Logging format")

    # Nested settings
    backend: BackendSettings = Field(default_factory=BackendSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses LRU cache to avoid re-parsing environment variables.
    """
    return Settings()
