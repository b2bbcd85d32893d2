"""
Runtime Configuration Module

Provides configuration loading and management for hashtree.
"""

from .runtime import (
    BuildConfig,
    LoggingConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "BuildConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
