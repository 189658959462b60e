"""
Service settings using pydantic-settings for type-safe configuration.

Environment variables are centralized here with typing and defaults for local
development. Settings are loaded once and cached.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    Production values should be set via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Upstream registration API ===
    gateway_base_url: str = Field(
        default="http://localhost:3001/api",
        description="Base URL of the upstream registration API",
    )
    gateway_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for upstream API calls",
    )

    # === Sessions ===
    session_idle_timeout_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Open registration sessions unused for this long are closed",
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        description="Log level: INFO, DEBUG or TRACE",
    )

    # === Payments ===
    currency: str = Field(
        default="USD",
        description="Currency for payment initiation",
    )
    payment_description: str = Field(
        default="Camp registration payment",
        description="Description sent with payment initiation",
    )
    payment_success_url: str = Field(
        default="http://localhost:3000/payment/success",
        description="Where the payment provider returns after a successful checkout",
    )
    payment_cancel_url: str = Field(
        default="http://localhost:3000/payment/cancel",
        description="Where the payment provider returns after a cancelled checkout",
    )

    # === CORS ===
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the HTTP API",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        normalized = v.upper()
        if normalized not in ("INFO", "DEBUG", "TRACE", "WARNING", "ERROR"):
            raise ValueError(f"log_level must be INFO, DEBUG, TRACE, WARNING or ERROR, got '{v}'")
        return normalized

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha():
            raise ValueError(f"currency must be a three letter code, got '{v}'")
        return v.upper()

    @field_validator("gateway_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once on first call and cached for the lifetime
    of the process. Use get_settings.cache_clear() in tests to reload.
    """
    return Settings()
