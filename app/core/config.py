"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

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
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class LLMSettings(BaseSettings):
    """Chat-completion provider configuration.

    Both supported providers speak the OpenAI chat-completions protocol;
    ``groq`` only changes the default endpoint.
    """

    provider: str = Field(
        "groq",
        description="LLM provider name (groq or openai)",
    )
    model: str = Field(
        "llama-3.1-70b-versatile",
        description="Default chat model; requests may override it",
    )
    api_key: str | None = Field(
        None,
        description="API key for the provider. Chat endpoints answer 501 when unset",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint; defaults to the provider's public endpoint",
    )
    timeout_seconds: float = Field(
        45.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
    )


class ReplicateSettings(BaseSettings):
    """Remote prediction service used for image analysis."""

    api_token: str | None = Field(
        None,
        description="Replicate API token. Image analysis answers 501 when unset",
    )
    base_url: str = Field(
        "https://api.replicate.com/v1/predictions",
        description="Predictions collection endpoint",
    )
    model_version: str = Field(
        "21ed7b6e76b2bdc3c7ebd6b246c9181d8e4da2982cd870be51bfc2d53da95e97",
        description="Model version hash (methexis-inc/img2prompt)",
    )
    max_poll_attempts: int = Field(
        30,
        description="Maximum number of status polls per prediction",
        ge=0,
    )
    poll_interval_seconds: float = Field(
        2.0,
        description="Delay between two status polls",
        ge=0,
    )
    timeout_seconds: float = Field(
        30.0,
        description="Timeout for each HTTP call to the prediction service",
    )

    model_config = SettingsConfigDict(
        env_prefix="REPLICATE_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-route, per-client-IP rate limiting",
    )
    rate_limit_backend: Literal["memory", "redis"] = Field(
        "memory",
        description="Counter store: in-process map or shared Redis",
    )
    redis_url: str | None = Field(
        None,
        description="Redis connection URL (required when backend is redis)",
    )
    rate_limit_requests: int = Field(
        20,
        description="Maximum number of requests allowed per window (per route and IP)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        300,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_fail_open: bool = Field(
        True,
        description="Allow requests when the counter store is unreachable",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field("json", description="Log line format")
    output: Literal["stdout", "file"] = Field("stdout", description="Log destination")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        0,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file. None of the
    provider credentials are required at startup; the endpoints depending on
    them report "not configured" instead.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=LLMSettings)
    replicate: ReplicateSettings = Field(default_factory=ReplicateSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
