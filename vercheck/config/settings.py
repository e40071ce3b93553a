"""Settings dataclass for VERCHECK configuration.

This module defines the Settings dataclass that holds all configuration
values and the mapping between config-file keys and attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vercheck import DEFAULT_USER_AGENT
from vercheck.manifest.store import manifest_url


@dataclass
class Settings:
    """Configuration settings for VERCHECK.

    All settings have sensible defaults and can be loaded from
    the configuration files (~/.vercheck-config, .vercheck) or
    the environment.

    Attributes:
        app_name: Application whose manifest is checked or published
        current_version: Version the application is running
        manifest_url: Full URL (or path) of the manifest to check
        manifest_base_url: Hosting base URL; the manifest is <base>/<app_name>.txt
        manifest_dir: Local directory used by publish/show/list
        fetch_timeout_seconds: HTTP timeout for manifest fetches
        user_agent: User-Agent header sent with fetches
    """

    app_name: str = ""
    current_version: str = ""

    # Manifest location
    manifest_url: str = ""
    manifest_base_url: str = ""
    manifest_dir: str = "manifests"

    # Fetch settings
    fetch_timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT

    # Config key to attribute mapping
    _key_mapping: dict[str, str] = field(
        default_factory=lambda: {
            "APP_NAME": "app_name",
            "CURRENT_VERSION": "current_version",
            "MANIFEST_URL": "manifest_url",
            "MANIFEST_BASE_URL": "manifest_base_url",
            "MANIFEST_DIR": "manifest_dir",
            "FETCH_TIMEOUT_SECONDS": "fetch_timeout_seconds",
            "USER_AGENT": "user_agent",
        },
        repr=False,
    )

    def get_attribute_for_key(self, key: str) -> str | None:
        """Get the attribute name for a config key."""
        return self._key_mapping.get(key)

    def get_key_for_attribute(self, attr: str) -> str | None:
        """Get the config key for an attribute name."""
        for key, value in self._key_mapping.items():
            if value == attr:
                return key
        return None

    @classmethod
    def get_config_keys(cls) -> list[str]:
        """Get list of all valid configuration keys."""
        temp = cls()
        return list(temp._key_mapping.keys())

    def resolve_manifest_url(self, app_name: str | None = None) -> str | None:
        """Work out which manifest to check.

        An explicit ``app_name`` is combined with MANIFEST_BASE_URL when one is
        configured. Otherwise MANIFEST_URL wins, then MANIFEST_BASE_URL with
        APP_NAME.

        Args:
            app_name: Overrides the configured APP_NAME

        Returns:
            The manifest URL, or None if neither setting is usable
        """
        if app_name and self.manifest_base_url:
            return manifest_url(self.manifest_base_url, app_name)
        if self.manifest_url:
            return self.manifest_url
        name = app_name or self.app_name
        if self.manifest_base_url and name:
            return manifest_url(self.manifest_base_url, name)
        return None


# Default configuration file path
CONFIG_FILE = Path.home() / ".vercheck-config"


__all__ = [
    "Settings",
    "CONFIG_FILE",
]
