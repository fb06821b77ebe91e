"""Environment-based configuration using pydantic-settings.

Example:
    >>> from modelkit.config import get_settings
    >>> settings = get_settings()
    >>> settings.session.temperature
    0.7
    >>> settings.validation.regex_mode
    'full'

    # Or with environment variables:
    # MODELKIT_SESSION_TEMPERATURE=0.3
    # MODELKIT_LOG_FORMAT=json
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SessionSettings(BaseSettings):
    """Defaults for new `SessionConfiguration` objects."""

    model_config = SettingsConfigDict(env_prefix="MODELKIT_SESSION_", extra="ignore")

    temperature: Annotated[float, Field(ge=0.0, le=1.0)] = 0.7
    max_tokens: Annotated[int, Field(ge=100)] = 4096
    max_tool_rounds: PositiveInt = Field(default=5, description="Tool-call rounds allowed per generation")


class ValidationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MODELKIT_VALIDATION_", extra="ignore")

    regex_mode: Literal["full", "search"] = Field(
        default="full",
        description="'full' requires the whole string to match, 'search' accepts any match",
    )


class ToolSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MODELKIT_TOOLS_", extra="ignore")

    timeout: PositiveFloat | None = Field(default=30.0, description="Per-call timeout in seconds")


class BatchSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MODELKIT_BATCH_", extra="ignore")

    concurrency: Annotated[int, Field(ge=1, le=256)] = 4


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MODELKIT_LOG_", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class ModelKitSettings(BaseSettings):
    """Root settings, loaded from `MODELKIT_*` variables and an optional `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="MODELKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    session: SessionSettings = Field(default_factory=SessionSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    tools: ToolSettings = Field(default_factory=ToolSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> ModelKitSettings:
    """Global settings instance (cached)."""
    return ModelKitSettings()


def clear_settings_cache() -> None:
    """Force the next `get_settings()` to re-read the environment."""
    get_settings.cache_clear()
