"""Configuration module for jython-complete."""

from jython_complete.config.settings import (
    InferenceSettings,
    ModuleSettings,
    ProviderSettings,
    Settings,
    get_settings,
)

__all__ = [
    "InferenceSettings",
    "ModuleSettings",
    "ProviderSettings",
    "Settings",
    "get_settings",
]
