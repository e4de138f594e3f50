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


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file and os.getenv("TESTING") != "true":
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    cors_allow_origin: str = Field(
        "*",
        description="Value of Access-Control-Allow-Origin on every response",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(0, description="Rotate log file at this size (0 disables)")
    backup_count: int = Field(3, description="Rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and propagate the request id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class SupabaseSettings(BaseSettings):
    """Identity provider and durable storage (Supabase) configuration."""

    url: str = Field(
        "http://localhost:54321",
        description="Supabase project URL",
    )
    anon_key: str | None = Field(
        None,
        description="Public anon key sent as the apikey header",
    )
    service_role_key: str | None = Field(
        None,
        description="Service credential used for the dispatcher's own reads",
    )
    timeout_seconds: float = Field(10.0, description="HTTP timeout for Supabase calls")

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        case_sensitive=False,
    )


class MailSettings(BaseSettings):
    """Outbound mail transport (Resend) configuration."""

    api_key: str | None = Field(
        None,
        description="Resend API key; the review notification endpoint refuses to run without it",
    )
    api_url: str = Field("https://api.resend.com/emails", description="Resend send endpoint")
    from_address: str = Field(
        "Play Store Publisher <onboarding@resend.dev>",
        description="Sender shown on admin notifications",
    )
    admin_emails: list[str] = Field(
        default_factory=lambda: [
            "admin@quantamesh.store",
            "support@quantamesh.store",
        ],
        description="Fixed recipient set for new-review notifications",
    )
    admin_panel_url: str = Field(
        "https://www.quantamesh.store/admin",
        description="Link embedded in notifications",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Upper bound for a single recipient delivery",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="RESEND_",
        case_sensitive=False,
    )


class CaptchaSettings(BaseSettings):
    """reCAPTCHA v3 verification configuration."""

    secret_key: str | None = Field(None, description="reCAPTCHA secret key")
    verify_url: str = Field(
        "https://www.google.com/recaptcha/api/siteverify",
        description="Token verification endpoint",
    )
    score_threshold: float = Field(
        0.5,
        description="Minimum score (0.0 likely bot, 1.0 likely human)",
        ge=0.0,
        le=1.0,
    )
    timeout_seconds: float = Field(10.0, description="HTTP timeout for verification")

    model_config = SettingsConfigDict(
        env_prefix="RECAPTCHA_",
        case_sensitive=False,
    )


class ReviewSettings(BaseSettings):
    """Review submission pipeline configuration."""

    rate_limit_max_attempts: int = Field(
        3,
        description="Reviews allowed per identity per window",
        ge=1,
    )
    rate_limit_window_ms: int = Field(
        60 * 60 * 1000,
        description="Rate limit window length in milliseconds",
        ge=1,
    )
    rate_limit_state_file: str = Field(
        ".review_rate_limit.json",
        description="File backing the client-side rate limit state",
    )
    functions_url: str = Field(
        "http://localhost:8000/v1",
        description="Base URL where the notification endpoint is served",
    )

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a setting has an invalid value.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    mail: MailSettings = Field(default_factory=MailSettings)
    captcha: CaptchaSettings = Field(default_factory=CaptchaSettings)
    review: ReviewSettings = Field(default_factory=ReviewSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
