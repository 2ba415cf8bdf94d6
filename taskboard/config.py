"""
Configuration for the Task Board web application.

Supports multiple environments (development, staging, production) with
appropriate defaults and validation. Environment variables prefixed with
``TASKBOARD_`` override defaults.
"""

from enum import Enum
import logging
import sys
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

load_dotenv()

DEFAULT_SESSION_SECRET = "dev-secret-change-me"


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings with environment-specific defaults.

    Uses Pydantic for validation and type safety.
    Environment variables override defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )

    # App
    app_title: str = Field(default="Task Board", description="Title shown in pages")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=True, description="Enable debug mode")

    # Server
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    reload: bool = Field(default=False, description="Enable auto-reload")

    # Sessions
    session_secret: str = Field(
        default=DEFAULT_SESSION_SECRET,
        min_length=8,
        description="Key used to sign session cookies",
    )
    session_cookie_name: str = Field(default="taskboard_session")
    session_max_age_seconds: int = Field(
        default=60 * 60 * 8, ge=60, description="Session lifetime in seconds"
    )
    cookie_secure: bool = Field(
        default=False, description="Only send the session cookie over HTTPS"
    )

    # Credentials for the single demo account
    admin_username: str = Field(default="admin")
    admin_password: str = Field(default="admin")

    # Store
    seed_demo_data: bool = Field(
        default=False, description="Create an example board on startup"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Enable JSON logging")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level and reject unknown names."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def apply_production_overrides(self) -> "Settings":
        """Disable debug and reload and require secure cookies in production."""
        if self.environment == Environment.PRODUCTION:
            self.debug = False
            self.reload = False
            self.cookie_secure = True
        elif self.environment != Environment.DEVELOPMENT:
            self.reload = False
        return self

    def get_environment_display(self) -> str:
        """Get human-readable environment name."""
        return self.environment.value.title()

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    def uses_default_secret(self) -> bool:
        return self.session_secret == DEFAULT_SESSION_SECRET

    def get_cookie_config(self) -> dict[str, Any]:
        """Keyword arguments for ``Response.set_cookie``."""
        return {
            "key": self.session_cookie_name,
            "max_age": self.session_max_age_seconds,
            "httponly": True,
            "samesite": "lax",
            "secure": self.cookie_secure,
        }


# Global settings instance
settings = Settings()


def configure_structlog() -> None:
    """Initialize structlog with clean, readable logging."""
    level = getattr(logging, settings.log_level)

    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        force=True,
        format="%(message)s",  # structlog renders the whole line
    )

    if settings.log_json:
        renderer: Any = structlog.processors.JSONRenderer()
        timestamper = structlog.processors.TimeStamper(fmt="iso")
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
        timestamper = structlog.processors.TimeStamper(fmt="%H:%M:%S")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            timestamper,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
