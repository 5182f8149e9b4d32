"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_auth_settings() -> "AuthSettings":
    """Build auth settings from environment.

    Static type checkers treat required fields as constructor arguments, which
    is not how BaseSettings is intended to be used.
    """

    return AuthSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Application-wide HTTP configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    api_key_required: bool = Field(
        True,
        description="Whether API key authentication is required on /api/v1 routes",
    )
    api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid API keys for authentication",
    )
    allowed_origins: str = Field(
        "*",
        description="Comma-separated list of CORS origins ('*' allows any)",
    )
    max_body_bytes: int = Field(
        1 << 20,
        description="Maximum accepted request body size in bytes",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class DatabaseSettings(BaseSettings):
    """SQLite storage configuration."""

    path: str = Field(
        "data/bodymetrics.db",
        description="Filesystem path of the SQLite database",
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        case_sensitive=False,
    )


class AuthSettings(BaseSettings):
    """Token issuance and password policy."""

    jwt_secret: str = Field(
        ...,
        min_length=1,
        description="HMAC secret used to sign access tokens (required)",
    )
    jwt_algorithm: str = Field(
        "HS256",
        description="JWT signing algorithm",
    )
    token_ttl_days: int = Field(
        30,
        description="Access token lifetime in days",
        ge=1,
    )
    reset_token_ttl_minutes: int = Field(
        15,
        description="Lifetime of password reset codes in minutes",
        ge=1,
    )
    min_password_length: int = Field(
        6,
        description="Minimum accepted password length",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
    )


class EmailSettings(BaseSettings):
    """Outbound email (Resend HTTP API) configuration."""

    resend_api_key: str | None = Field(
        None,
        description="Resend API key; password reset emails fail without it",
    )
    from_address: str | None = Field(
        None,
        description="Sender address for outbound emails",
    )
    api_url: str = Field(
        "https://api.resend.com/emails",
        description="Resend send-email endpoint",
    )
    timeout_seconds: float = Field(
        10.0,
        description="HTTP timeout for the email provider",
    )

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Per-operation attempt limits for sensitive auth endpoints."""

    enabled: bool = Field(
        True,
        description="Enable per-client throttling of login and password reset requests",
    )
    login_attempts: int = Field(
        5,
        description="Accepted login attempts per client within the window",
        ge=0,
    )
    login_window_seconds: int = Field(
        15 * 60,
        description="Login throttling window in seconds",
        ge=1,
    )
    forgot_password_attempts: int = Field(
        3,
        description="Accepted password reset requests per client within the window",
        ge=0,
    )
    forgot_password_window_seconds: int = Field(
        60 * 60,
        description="Password reset request throttling window in seconds",
        ge=1,
    )
    trust_forwarded_for: bool = Field(
        True,
        description="Use X-Forwarded-For as the client identity when present",
    )

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(0, description="Rotate the log file at this size (0 disables)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if required settings are missing.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=_build_auth_settings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
