"""Configuration module for Archivr."""

from archivr.config.settings import (
    ArchivrSettings,
    BatchConfig,
    ModelTierConfig,
    OpenRouterConfig,
    get_settings,
    reload_settings,
)

__all__ = [
    "ArchivrSettings",
    "BatchConfig",
    "ModelTierConfig",
    "OpenRouterConfig",
    "get_settings",
    "reload_settings",
]
