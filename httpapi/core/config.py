"""Centralized configuration management with environment-aware defaults.

Configuration is declared with Pydantic Settings, so every value is typed
and validated and can be overridden from the environment.

Configuration sources (in order of precedence):
1. Environment variables (nested values use the ``__`` delimiter, e.g.
   ``CLIENT_CONFIG__TIMEOUT=5``)
2. .env file in the working directory
3. Default values in model definitions
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from httpapi.core.constants import CORRELATION_ID_HEADER


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json", "aws"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class ClientConfig(BaseModel):
    """Defaults for outbound API clients."""

    base_url: str | None = Field(
        default=None,
        description="Base URL used when a client is created without one",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        le=900,
        description="Timeout in seconds for a single request/response exchange",
    )
    follow_redirects: bool = Field(
        default=False,
        description="Follow redirects instead of returning 3xx responses",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v


class ServerConfig(BaseModel):
    """Settings for the inbound request pipeline."""

    correlation_id_header: str = Field(
        default=CORRELATION_ID_HEADER,
        description="Header carrying the caller's correlation ID",
    )
    log_request_headers: bool = Field(
        default=False,
        description="Log sanitized inbound headers at DEBUG level",
    )

    @field_validator("correlation_id_header", mode="after")
    @classmethod
    def lower_header(cls, v: str) -> str:
        """Header lookups happen on normalized, lower-cased names."""
        return v.lower()


class Settings(BaseSettings):
    """Main settings class for the runtime."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = Field(default="httpapi", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=False, description="Debug mode flag")

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )
    client_config: ClientConfig = Field(
        default_factory=ClientConfig, description="API client configuration"
    )
    server_config: ServerConfig = Field(
        default_factory=ServerConfig, description="Request pipeline configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json", "aws"]:
        """Auto-detect log formatter based on environment."""
        if os.getenv("AWS_EXECUTION_ENV"):  # Lambda / ECS
            return "aws"

        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
