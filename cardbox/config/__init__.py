"""CardBox configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/cardbox/config.toml (user config)
4. /etc/cardbox/config.toml (system config)

Secrets are loaded from secrets.env files in the same directories.
"""

from cardbox.config.schema import (
    CardboxConfig,
    DatabaseConfig,
    ImportConfig,
    SecretsConfig,
    ServerConfig,
    StorageConfig,
)
from cardbox.config.settings import get_settings, settings

__all__ = [
    "CardboxConfig",
    "DatabaseConfig",
    "ImportConfig",
    "SecretsConfig",
    "ServerConfig",
    "StorageConfig",
    "get_settings",
    "settings",
]
