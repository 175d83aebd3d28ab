"""
Runtime Configuration Module

Provides configuration loading and management for fetch-shaper.
"""

from .runtime import (
    HttpConfig,
    LoggingConfig,
    RuntimeConfig,
    configure_logging,
    get_default_config,
    set_default_config,
    setup_logging,
)

__all__ = [
    "HttpConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "configure_logging",
    "get_default_config",
    "set_default_config",
    "setup_logging",
]
