"""Configuration module - settings and environment management."""

from skraper.config.settings import (
    ConfigurationError,
    DEFAULT_USER_AGENT,
    Settings,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "DEFAULT_USER_AGENT",
    "Settings",
    "load_settings",
]
