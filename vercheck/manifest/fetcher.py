"""Manifest sources: where the remote version text comes from.

A source is anything with a ``fetch_text()`` method returning the raw
manifest body. The HTTP source issues exactly one GET per call; failures
are reported as FetchFailedError and never retried.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import unquote, urlparse

import httpx

from vercheck import DEFAULT_USER_AGENT
from vercheck.utils.errors import FetchFailedError
from vercheck.utils.logging import log_message

DEFAULT_TIMEOUT_SECONDS = 10.0


@runtime_checkable
class ManifestSource(Protocol):
    """Anything that can produce the text of a manifest.

    Sources may also expose a ``location`` string (URL or path) used in
    messages; it is optional.
    """

    def fetch_text(self) -> str:
        """Return the raw manifest text.

        Raises:
            FetchFailedError: If the manifest cannot be retrieved
        """
        ...


class HttpManifestSource:
    """Fetches a manifest with a single HTTP(S) GET.

    HTTP Client Sharing:
        An ``httpx.Client`` may be injected to reuse connections across
        checks. The timeout is then applied per request. Without an
        injected client a short-lived one is created for each fetch.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.http_client = http_client
        self.user_agent = user_agent

    @property
    def location(self) -> str:
        return self.url

    def fetch_text(self) -> str:
        """GET the manifest URL and decode the body as UTF-8.

        Raises:
            FetchFailedError: On transport errors, timeouts, non-2xx
                responses or an undecodable body
        """
        log_message(f"Fetching manifest: {self.url}")
        try:
            response = self._execute_request()
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchFailedError(self.url, f"timed out after {self.timeout_seconds}s") from e
        except httpx.HTTPStatusError as e:
            raise FetchFailedError(
                self.url, f"HTTP {e.response.status_code} {e.response.reason_phrase}".strip()
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchFailedError(self.url, str(e) or type(e).__name__) from e

        try:
            # utf-8-sig drops a BOM left by Windows editors
            return response.content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FetchFailedError(self.url, "response body is not valid UTF-8") from e

    def _execute_request(self) -> httpx.Response:
        headers = {"User-Agent": self.user_agent, "Accept": "text/plain"}
        timeout = httpx.Timeout(self.timeout_seconds)

        if self.http_client is not None:
            return self.http_client.get(self.url, headers=headers, timeout=timeout)

        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            return client.get(self.url, headers=headers)


class FileManifestSource:
    """Reads a manifest from the local filesystem."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def fetch_text(self) -> str:
        log_message(f"Reading manifest: {self.path}")
        try:
            return self.path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise FetchFailedError(str(self.path), "file is not valid UTF-8") from e
        except OSError as e:
            raise FetchFailedError(str(self.path), e.strerror or str(e)) from e


def source_for(
    location: str,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    http_client: httpx.Client | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> ManifestSource:
    """Pick a manifest source for a URL or path.

    ``http://`` and ``https://`` locations are fetched over HTTP;
    ``file://`` URLs and bare paths are read from disk.
    """
    scheme = urlparse(location).scheme.lower()
    if scheme in ("http", "https"):
        return HttpManifestSource(
            location,
            timeout_seconds=timeout_seconds,
            http_client=http_client,
            user_agent=user_agent,
        )
    if scheme == "file":
        return FileManifestSource(unquote(urlparse(location).path))
    return FileManifestSource(location)


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "ManifestSource",
    "HttpManifestSource",
    "FileManifestSource",
    "source_for",
]
