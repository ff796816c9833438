"""Application configuration model using pydantic-settings."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PARALLEL = 10
DEFAULT_REQUEST_TIMEOUT = 5.0


class Config(BaseSettings):
    """Configuration loaded from URL_DIGESTER_* environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="URL_DIGESTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    parallel: int = DEFAULT_PARALLEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = "WARNING"
    user_agent: str = "url-digester/1.0"

    @field_validator("parallel")
    @classmethod
    def validate_parallel(cls, value: int) -> int:
        """Non-positive parallelism falls back to the default."""
        if value <= 0:
            return DEFAULT_PARALLEL
        return value

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, value: float) -> float:
        """Request timeout must be positive."""
        if value <= 0:
            msg = "request_timeout must be greater than 0"
            raise ValueError(msg)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Log level must be a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            msg = f"log_level must be one of {', '.join(sorted(valid_levels))}"
            raise ValueError(msg)
        return upper_value


def resolve_parallel(requested: int | None, default: int = DEFAULT_PARALLEL) -> int:
    """Return ``requested`` when it is a positive count, otherwise ``default``."""
    if requested is not None and requested > 0:
        return requested
    return default
