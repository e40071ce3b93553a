"""Tests for vercheck.config.manager module.

Tests cover:
- ConfigManager.load parsing and type conversion
- Cascading hierarchy: environment > local > global > defaults
- Local config discovery (_find_local_config)
- ConfigManager.save with validation, escaping and atomic writes
- ConfigManager.get / get_config_source / show
"""

import os
import stat
from unittest.mock import patch

import pytest

from vercheck.config.manager import ConfigManager


class TestConfigManagerLoad:
    """Tests for ConfigManager.load method."""

    def test_load_missing_file(self, tmp_path):
        """Returns defaults when config file doesn't exist."""
        manager = ConfigManager(tmp_path / "missing-config")

        settings = manager.load()

        assert settings.app_name == ""
        assert settings.fetch_timeout_seconds == 10.0

    def test_load_valid_file(self, temp_config_file):
        """Parses KEY=VALUE and KEY="VALUE" formats."""
        settings = ConfigManager(temp_config_file).load()

        assert settings.app_name == "myapp"
        assert settings.current_version == "1.0.0"
        assert settings.manifest_base_url == "https://example.com/versions"
        assert settings.fetch_timeout_seconds == 5.0

    def test_load_ignores_comments_and_blank_lines(self, tmp_path):
        """Skips comments, empty lines and malformed lines."""
        config_file = tmp_path / "config"
        config_file.write_text(
            """# comment
APP_NAME="first"

not a config line
CURRENT_VERSION=2.0.0
"""
        )

        settings = ConfigManager(config_file).load()

        assert settings.app_name == "first"
        assert settings.current_version == "2.0.0"

    def test_load_handles_single_quotes(self, tmp_path):
        """Single-quoted values are literal."""
        config_file = tmp_path / "config"
        config_file.write_text("USER_AGENT='agent \\\"x\\\"'\n")

        settings = ConfigManager(config_file).load()

        assert settings.user_agent == 'agent \\"x\\"'

    def test_load_parses_float(self, tmp_path):
        """Timeout accepts fractional seconds."""
        config_file = tmp_path / "config"
        config_file.write_text('FETCH_TIMEOUT_SECONDS="2.5"\n')

        assert ConfigManager(config_file).load().fetch_timeout_seconds == 2.5

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_load_keeps_default_on_bad_number(self, tmp_path, raw):
        """Non-numeric or non-positive values keep the default."""
        config_file = tmp_path / "config"
        config_file.write_text(f'FETCH_TIMEOUT_SECONDS="{raw}"\n')

        assert ConfigManager(config_file).load().fetch_timeout_seconds == 10.0

    def test_load_ignores_unknown_keys(self, tmp_path):
        """Unknown keys are kept raw but do not touch settings."""
        config_file = tmp_path / "config"
        config_file.write_text('SOMETHING_ELSE="x"\n')
        manager = ConfigManager(config_file)

        manager.load()

        assert manager.get("SOMETHING_ELSE") == "x"

    def test_load_is_idempotent(self, tmp_path):
        """Reloading after a file change drops stale values."""
        config_file = tmp_path / "config"
        config_file.write_text('APP_NAME="one"\n')
        manager = ConfigManager(config_file)
        manager.load()

        config_file.write_text("")
        settings = manager.load()

        assert settings.app_name == ""
        assert manager.get("APP_NAME") == ""


class TestCascadingHierarchy:
    """Tests for environment > local > global > defaults."""

    def test_local_overrides_global(self, tmp_path, monkeypatch):
        """A .vercheck in the working tree beats the global file."""
        global_file = tmp_path / "global"
        global_file.write_text('APP_NAME="global-app"\nCURRENT_VERSION="1.0.0"\n')
        project = tmp_path / "project"
        (project / "sub").mkdir(parents=True)
        (project / ".vercheck").write_text('APP_NAME="local-app"\n')
        monkeypatch.chdir(project / "sub")
        manager = ConfigManager(global_file)

        settings = manager.load()

        assert settings.app_name == "local-app"
        assert settings.current_version == "1.0.0"
        assert manager.local_config_path == project / ".vercheck"
        assert manager.get_config_source("APP_NAME").startswith("local")
        assert manager.get_config_source("CURRENT_VERSION").startswith("global")

    def test_environment_overrides_files(self, tmp_path, monkeypatch):
        """Environment variables win over every file."""
        global_file = tmp_path / "global"
        global_file.write_text('CURRENT_VERSION="1.0.0"\n')
        monkeypatch.setenv("CURRENT_VERSION", "3.0.0")
        manager = ConfigManager(global_file)

        settings = manager.load()

        assert settings.current_version == "3.0.0"
        assert manager.get_config_source("CURRENT_VERSION") == "environment"

    def test_unrelated_environment_ignored(self, tmp_path, monkeypatch):
        """Only known keys are read from the environment."""
        monkeypatch.setenv("RANDOM_VAR", "x")
        manager = ConfigManager(tmp_path / "global")

        manager.load()

        assert manager.get("RANDOM_VAR") == ""

    def test_default_source(self, tmp_path):
        """Unset keys report 'default'."""
        manager = ConfigManager(tmp_path / "global")
        manager.load()

        assert manager.get_config_source("APP_NAME") == "default"


class TestFindLocalConfig:
    """Tests for local config discovery."""

    def test_stops_at_repository_root(self, tmp_path, monkeypatch):
        """Search does not climb above a directory containing .git."""
        (tmp_path / ".vercheck").write_text('APP_NAME="outside"\n')
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        (repo / "src").mkdir()
        monkeypatch.chdir(repo / "src")

        assert ConfigManager(tmp_path / "global")._find_local_config() is None

    def test_finds_config_at_repository_root(self, tmp_path, monkeypatch):
        """A .vercheck next to .git is found from a subdirectory."""
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        (repo / ".vercheck").write_text("")
        (repo / "src").mkdir()
        monkeypatch.chdir(repo / "src")

        assert ConfigManager(tmp_path / "global")._find_local_config() == repo / ".vercheck"


class TestConfigManagerSave:
    """Tests for ConfigManager.save method."""

    def test_save_creates_file(self, tmp_path):
        """Creates the global file with a quoted value."""
        config_file = tmp_path / "config"
        manager = ConfigManager(config_file)

        manager.save("APP_NAME", "myapp")

        assert config_file.read_text() == 'APP_NAME="myapp"\n'
        assert manager.settings.app_name == "myapp"

    def test_save_updates_in_place(self, tmp_path):
        """Existing key is replaced; comments and other keys are kept."""
        config_file = tmp_path / "config"
        config_file.write_text('# header\nAPP_NAME="old"\nCURRENT_VERSION="1.0.0"\n')
        manager = ConfigManager(config_file)

        manager.save("APP_NAME", "new")

        assert config_file.read_text() == '# header\nAPP_NAME="new"\nCURRENT_VERSION="1.0.0"\n'

    def test_save_sets_secure_permissions(self, tmp_path):
        """Config files are written with 600 permissions."""
        config_file = tmp_path / "config"

        ConfigManager(config_file).save("APP_NAME", "myapp")

        if os.name == "posix":
            assert stat.S_IMODE(config_file.stat().st_mode) == 0o600

    def test_save_round_trips_special_characters(self, tmp_path):
        """Quotes and backslashes survive save/load."""
        config_file = tmp_path / "config"
        value = 'ua "quoted" \\ path\\"mix'
        manager = ConfigManager(config_file)

        manager.save("USER_AGENT", value)

        assert ConfigManager(config_file).load().user_agent == value

    def test_save_rejects_invalid_key(self, tmp_path):
        """Key names must look like identifiers."""
        with pytest.raises(ValueError, match="Invalid config key"):
            ConfigManager(tmp_path / "config").save("BAD-KEY", "x")

    def test_save_rejects_invalid_scope(self, tmp_path):
        """Scope must be global or local."""
        with pytest.raises(ValueError, match="Invalid scope"):
            ConfigManager(tmp_path / "config").save("APP_NAME", "x", scope="system")  # type: ignore[arg-type]

    def test_save_local_creates_file_at_repo_root(self, tmp_path, monkeypatch):
        """Local scope writes .vercheck at the repository root."""
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        (repo / "src").mkdir()
        monkeypatch.chdir(repo / "src")
        manager = ConfigManager(tmp_path / "global")
        manager.load()

        manager.save("APP_NAME", "repo-app", scope="local")

        assert (repo / ".vercheck").read_text() == 'APP_NAME="repo-app"\n'
        assert manager.settings.app_name == "repo-app"

    def test_save_warns_when_env_overrides(self, tmp_path, monkeypatch):
        """Saving a value shadowed by the environment returns a warning."""
        monkeypatch.setenv("APP_NAME", "from-env")
        manager = ConfigManager(tmp_path / "config")

        warning = manager.save("APP_NAME", "from-file")

        assert warning is not None
        assert "environment variable" in warning
        assert manager.settings.app_name == "from-env"

    def test_save_warns_when_local_overrides(self, tmp_path, monkeypatch):
        """Saving globally a key set locally returns a warning."""
        project = tmp_path / "project"
        project.mkdir()
        (project / ".vercheck").write_text('APP_NAME="local"\n')
        monkeypatch.chdir(project)
        manager = ConfigManager(tmp_path / "global")
        manager.load()

        warning = manager.save("APP_NAME", "global")

        assert warning is not None
        assert "local config" in warning

    def test_save_no_warning_when_effective(self, tmp_path):
        """No warning when the saved value takes effect."""
        assert ConfigManager(tmp_path / "config").save("APP_NAME", "x") is None

    def test_failed_write_leaves_no_temp_file(self, tmp_path):
        """Temp files are removed when the write fails."""
        config_file = tmp_path / "config"
        manager = ConfigManager(config_file)

        with patch("vercheck.config.manager.os.chmod", side_effect=OSError("denied")):
            with pytest.raises(OSError):
                manager.save("APP_NAME", "x")

        assert list(tmp_path.glob(".vercheck-config-*")) == []
        assert not config_file.exists()


class TestConfigManagerShow:
    """Tests for ConfigManager.show method."""

    def test_show_prints_settings(self, temp_config_file):
        """Shows config paths and resolved manifest URL."""
        manager = ConfigManager(temp_config_file)
        manager.load()

        with patch("vercheck.config.manager.console") as mock_console, patch(
            "vercheck.config.manager.print_info"
        ) as mock_info:
            manager.show()

        printed = " ".join(str(c[0][0]) for c in mock_console.print.call_args_list if c[0])
        assert "myapp" in printed
        assert "https://example.com/versions/myapp.txt" in printed
        assert any(str(temp_config_file) in c[0][0] for c in mock_info.call_args_list)

    def test_show_handles_invalid_app_name(self, tmp_path):
        """An unusable APP_NAME is reported instead of crashing."""
        config_file = tmp_path / "config"
        config_file.write_text('APP_NAME="../bad"\nMANIFEST_BASE_URL="https://e.com"\n')
        manager = ConfigManager(config_file)
        manager.load()

        with patch("vercheck.config.manager.console") as mock_console, patch(
            "vercheck.config.manager.print_info"
        ):
            manager.show()

        printed = " ".join(str(c[0][0]) for c in mock_console.print.call_args_list if c[0])
        assert "(invalid:" in printed
