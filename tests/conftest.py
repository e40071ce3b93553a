"""Shared pytest fixtures for VERCHECK tests."""

from pathlib import Path

import httpx
import pytest

from vercheck.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the user's real configuration.

    Points the global config at a temp file, runs from an empty temp
    directory and clears config keys from the environment.
    """
    global_config = tmp_path / ".vercheck-config"
    monkeypatch.setattr("vercheck.config.manager.CONFIG_FILE", global_config)
    for key in Settings.get_config_keys():
        monkeypatch.delenv(key, raising=False)

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return global_config


@pytest.fixture
def manifest_dir(tmp_path: Path) -> Path:
    """Directory for manifest files."""
    directory = tmp_path / "manifests"
    directory.mkdir()
    return directory


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary config file with sample values."""
    config_file = tmp_path / "sample-config"
    config_file.write_text(
        """# VERCHECK Configuration
APP_NAME="myapp"
CURRENT_VERSION="1.0.0"
MANIFEST_BASE_URL="https://example.com/versions"
FETCH_TIMEOUT_SECONDS="5"
"""
    )
    return config_file


@pytest.fixture
def make_http_client():
    """Factory for httpx.Client instances backed by a MockTransport.

    ``make_http_client(body, status_code)`` returns a client whose GETs get
    a canned response; ``make_http_client(raises=exc)`` one whose GETs raise.
    Every request is recorded in ``client.requests``.
    """
    clients: list[httpx.Client] = []

    def factory(
        body: bytes | str = b"",
        status_code: int = 200,
        raises: Exception | None = None,
    ) -> httpx.Client:
        content = body.encode("utf-8") if isinstance(body, str) else body
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if raises is not None:
                raise raises
            return httpx.Response(status_code, content=content)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        client.requests = requests  # type: ignore[attr-defined]
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
