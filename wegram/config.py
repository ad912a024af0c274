"""Process-wide relay configuration."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_PREFIX = "public"
DEFAULT_API_BASE = "https://api.telegram.org"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class RelayConfig(BaseModel):
    """Immutable settings, built once at startup and passed into the app."""

    model_config = ConfigDict(frozen=True)

    prefix: str = DEFAULT_PREFIX
    secret_token: str = ""
    api_base: str = DEFAULT_API_BASE
    log_level: str = "INFO"

    @field_validator("prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip("/")
        if not value:
            raise ValueError("prefix must not be empty")
        return value

    @field_validator("api_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return value

    @property
    def delivery_enabled(self) -> bool:
        """Webhook deliveries are only accepted with a non-empty secret."""
        return bool(self.secret_token)

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Create RelayConfig from environment variables."""
        return cls(
            prefix=os.environ.get("PREFIX", DEFAULT_PREFIX),
            secret_token=os.environ.get("SECRET_TOKEN", ""),
            api_base=os.environ.get("TELEGRAM_API_BASE", DEFAULT_API_BASE),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
