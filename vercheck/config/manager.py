"""Configuration manager for VERCHECK.

This module provides the ConfigManager class for loading, saving, and
managing configuration values with a cascading hierarchy:

    1. Environment Variables (highest priority)
    2. Local Config (.vercheck in project/parent directories)
    3. Global Config (~/.vercheck-config)
    4. Built-in Defaults (lowest priority)

A release pipeline can keep APP_NAME and MANIFEST_BASE_URL in a project's
.vercheck file while CI injects CURRENT_VERSION through the environment.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Literal

from rich.markup import escape

from vercheck.config.settings import CONFIG_FILE, Settings
from vercheck.utils.console import console, print_header, print_info
from vercheck.utils.logging import log_message

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_LINE_PATTERN = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)=(.*)$")
_ESCAPE_PATTERN = re.compile(r'\\([\\"])')


class ConfigManager:
    """Manages configuration loading and saving with cascading hierarchy.

    Configuration Precedence (highest to lowest):
    1. Environment Variables - CI/CD, temporary overrides
    2. Local Config (.vercheck) - Project-specific settings
    3. Global Config (~/.vercheck-config) - User defaults
    4. Built-in Defaults - Fallback values

    Files are parsed line by line as KEY=VALUE or KEY="VALUE"; nothing is
    evaluated. Writes are atomic and use 600 permissions.

    Attributes:
        settings: Current settings instance
        global_config_path: Path to global ~/.vercheck-config file
        local_config_path: Path to discovered local .vercheck file (after load)
    """

    LOCAL_CONFIG_NAME = ".vercheck"
    GLOBAL_CONFIG_NAME = ".vercheck-config"

    def __init__(self, global_config_path: Path | None = None) -> None:
        """Initialize the configuration manager.

        Args:
            global_config_path: Optional custom path to global config file.
                                Defaults to ~/.vercheck-config.
        """
        self.global_config_path = global_config_path or CONFIG_FILE
        self.local_config_path: Path | None = None
        self.settings = Settings()
        self._raw_values: dict[str, str] = {}
        self._config_sources: dict[str, str] = {}

    def load(self) -> Settings:
        """Load configuration from all sources with cascading precedence.

        Each call starts from clean defaults, so repeated loads never keep
        stale values.

        Returns:
            Settings instance with loaded values
        """
        self.settings = Settings()
        self.local_config_path = None
        self._raw_values = {}
        self._config_sources = {}

        if self.global_config_path.exists():
            log_message(f"Loading global configuration from {self.global_config_path}")
            self._load_file(self.global_config_path, source=f"global ({self.global_config_path})")

        local_path = self._find_local_config()
        if local_path:
            self.local_config_path = local_path
            log_message(f"Loading local configuration from {local_path}")
            self._load_file(local_path, source=f"local ({local_path})")

        self._load_environment()

        for key, value in self._raw_values.items():
            self._apply_value_to_settings(key, value)

        log_message(f"Configuration loaded successfully ({len(self._raw_values)} keys)")
        return self.settings

    def _find_local_config(self) -> Path | None:
        """Find local .vercheck config by traversing up from CWD.

        Stops at the first .vercheck file, at a directory containing .git
        (repository root), or at the filesystem root.

        Returns:
            Path to local config file, or None if not found
        """
        current = Path.cwd()
        while True:
            config_path = current / self.LOCAL_CONFIG_NAME
            if config_path.is_file():
                return config_path

            if (current / ".git").exists():
                break

            parent = current.parent
            if parent == current:
                break
            current = parent

        return None

    def _find_repo_root(self) -> Path | None:
        current = Path.cwd()
        while True:
            if (current / ".git").exists():
                return current
            parent = current.parent
            if parent == current:
                return None
            current = parent

    def _load_file(self, path: Path, source: str = "file") -> None:
        """Load key=value pairs from a config file.

        Args:
            path: Path to the config file
            source: Source identifier for debugging
        """
        for key, value in self._read_file_values(path).items():
            self._raw_values[key] = value
            self._config_sources[key] = source

    def _load_environment(self) -> None:
        """Override config with environment variables.

        Only known config keys are read, so unrelated environment variables
        never leak into the configuration.
        """
        for key in Settings.get_config_keys():
            env_value = os.environ.get(key)
            if env_value is not None:
                self._raw_values[key] = env_value
                self._config_sources[key] = "environment"

    def _apply_value_to_settings(self, key: str, value: str) -> None:
        """Apply a raw config value to the settings object.

        Values that cannot be converted to the attribute's type keep the
        default and log a warning.

        Args:
            key: Configuration key
            value: Raw string value from file or environment
        """
        attr = self.settings.get_attribute_for_key(key)
        if attr is None:
            return

        current_value = getattr(self.settings, attr)

        if isinstance(current_value, bool):
            setattr(self.settings, attr, value.lower() in ("true", "1", "yes"))
        elif isinstance(current_value, (int, float)):
            try:
                converted = type(current_value)(value)
            except ValueError:
                logger.warning(f"Ignoring non-numeric value for {key}: {value!r}")
                return
            if converted <= 0:
                logger.warning(f"Ignoring non-positive value for {key}: {value!r}")
                return
            setattr(self.settings, attr, converted)
        else:
            setattr(self.settings, attr, value.strip())

    def save(
        self,
        key: str,
        value: str,
        scope: Literal["global", "local"] = "global",
        warn_on_override: bool = True,
    ) -> str | None:
        """Save a configuration value to a config file.

        Writes the value to the chosen file and reloads, so ``settings``
        always reflects the effective value after precedence is applied.
        If scope is "local" and no local config exists, a .vercheck file is
        created at the repository root (or the CWD outside a repository).

        Args:
            key: Configuration key (must match [a-zA-Z_][a-zA-Z0-9_]*)
            value: Configuration value to save
            scope: "global" (~/.vercheck-config) or "local" (.vercheck)
            warn_on_override: Return a warning if a higher-priority source
                              overrides the saved value

        Returns:
            Warning message describing overrides (if any), None otherwise

        Raises:
            ValueError: If the key name or scope is invalid
        """
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid config key: {key}")

        if scope not in ("global", "local"):
            raise ValueError(f"Invalid scope: {scope}. Must be 'global' or 'local'")

        if scope == "local":
            if self.local_config_path is None:
                root = self._find_repo_root() or Path.cwd()
                self.local_config_path = root / self.LOCAL_CONFIG_NAME
            target_path = self.local_config_path
        else:
            target_path = self.global_config_path

        existing_lines: list[str] = []
        if target_path.exists():
            existing_lines = target_path.read_text().splitlines()

        new_lines: list[str] = []
        written = False
        stored = f'{key}="{self._escape_value_for_storage(value)}"'

        for line in existing_lines:
            match = _LINE_PATTERN.match(line.strip())
            if match and match.group(1) == key:
                new_lines.append(stored)
                written = True
            else:
                # Comments, blank lines, other keys and malformed lines are kept
                new_lines.append(line)

        if not written:
            new_lines.append(stored)

        self._atomic_write_to_path(new_lines, target_path)
        log_message(f"Configuration saved to {scope}: {key}")

        warning = self._check_override_warning(key, scope, warn_on_override)

        self.load()
        return warning

    def _check_override_warning(
        self,
        key: str,
        scope: Literal["global", "local"],
        warn_on_override: bool,
    ) -> str | None:
        """Check if a saved value will be overridden by a higher-priority source."""
        if not warn_on_override:
            return None

        env_value = os.environ.get(key)
        if env_value is not None:
            return (
                f"Warning: '{key}' saved to {scope} config but is overridden "
                f"by environment variable (effective value: '{env_value}')"
            )

        if scope == "global" and self.local_config_path and self.local_config_path.exists():
            local_values = self._read_file_values(self.local_config_path)
            if key in local_values:
                return (
                    f"Warning: '{key}' saved to global config but is overridden "
                    f"by local config at {self.local_config_path} "
                    f"(effective value: '{local_values[key]}')"
                )

        return None

    def _read_file_values(self, path: Path) -> dict[str, str]:
        """Read key=value pairs from a config file without modifying state.

        Double-quoted values are unescaped; single-quoted values are literal.
        """
        values: dict[str, str] = {}
        if not path.exists():
            return values

        with path.open() as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue

                match = _LINE_PATTERN.match(line)
                if not match:
                    continue

                key, value = match.groups()
                if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
                    value = self._unescape_value(value[1:-1])
                elif len(value) >= 2 and value.startswith("'") and value.endswith("'"):
                    value = value[1:-1]
                values[key] = value
        return values

    def _atomic_write_to_path(self, lines: list[str], target_path: Path) -> None:
        """Atomically write lines to a config file with 600 permissions."""
        target_path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=target_path.parent,
            prefix=".vercheck-config-",
        )
        try:
            with os.fdopen(fd, "w") as f:
                f.write("\n".join(lines))
                if lines:
                    f.write("\n")

            os.chmod(temp_path, 0o600)
            Path(temp_path).replace(target_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    @staticmethod
    def _escape_value_for_storage(value: str) -> str:
        """Escape backslashes and double quotes for double-quoted storage."""
        return value.replace("\\", "\\\\").replace('"', '\\"')

    @staticmethod
    def _unescape_value(value: str) -> str:
        """Reverse _escape_value_for_storage."""
        return _ESCAPE_PATTERN.sub(r"\1", value)

    def get(self, key: str, default: str = "") -> str:
        """Get a raw configuration value.

        Args:
            key: Configuration key to retrieve
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._raw_values.get(key, default)

    def get_config_source(self, key: str) -> str:
        """Return where a configuration value came from.

        Returns:
            "environment", "local (/path)", "global (/path)", or "default"
        """
        return self._config_sources.get(key, "default")

    def show(self) -> None:
        """Display current configuration using Rich formatting."""
        print_header("Current Configuration")

        print_info(f"Global config: {self.global_config_path}")
        if self.local_config_path:
            print_info(f"Local config:  {self.local_config_path}")
        else:
            print_info("Local config:  (not found)")
        console.print()

        s = self.settings

        console.print("  [bold]Application:[/bold]")
        console.print(f"    App Name: {escape(s.app_name or '(not set)')}")
        console.print(f"    Current Version: {escape(s.current_version or '(not set)')}")
        console.print()

        console.print("  [bold]Manifest:[/bold]")
        console.print(f"    Manifest URL: {escape(s.manifest_url or '(not set)')}")
        console.print(f"    Manifest Base URL: {escape(s.manifest_base_url or '(not set)')}")
        try:
            resolved = s.resolve_manifest_url() or "(not resolvable)"
        except ValueError as e:
            resolved = f"(invalid: {e})"
        console.print(f"    Resolved URL: {escape(resolved)}")
        console.print(f"    Manifest Directory: {escape(s.manifest_dir)}")
        console.print()

        console.print("  [bold]Fetch:[/bold]")
        console.print(f"    Timeout: {s.fetch_timeout_seconds}s")
        console.print(f"    User-Agent: {escape(s.user_agent)}")
        console.print()


__all__ = [
    "ConfigManager",
]
