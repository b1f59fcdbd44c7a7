"""
Configuration package for the Shortlink Favorites service.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    KVBackend,
    KVStoreSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "KVBackend",
    "KVStoreSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
