"""Configuration loaded from the environment."""

from .settings import (
    BatchSettings,
    LoggingSettings,
    ModelKitSettings,
    SessionSettings,
    ToolSettings,
    ValidationSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "ModelKitSettings", "SessionSettings", "ValidationSettings", "ToolSettings",
    "BatchSettings", "LoggingSettings", "get_settings", "clear_settings_cache",
]
