"""Configuration management for VERCHECK.

This package contains:
- settings: Settings dataclass with configuration fields
- manager: ConfigManager class for loading/saving configuration

Configuration Format
====================
Flat KEY=VALUE lines (environment variable style), for example:

    APP_NAME=myapp
    MANIFEST_BASE_URL=https://example.com/versions
    FETCH_TIMEOUT_SECONDS=5
"""

from vercheck.config.manager import ConfigManager
from vercheck.config.settings import CONFIG_FILE, Settings

__all__ = [
    "Settings",
    "ConfigManager",
    "CONFIG_FILE",
]
