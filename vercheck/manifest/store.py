"""Directory-backed manifest store.

Each application has one manifest: a single-line text file named
``<app_name>.txt`` holding its current version. Publishing a release
overwrites the file; no history is kept. The directory is meant to be
served as-is by any static HTTP host.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from vercheck.utils.errors import InvalidVersionFormatError, ManifestNotFoundError
from vercheck.utils.logging import log_message
from vercheck.version import parse_version

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".txt"
_APP_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class ManifestEntry:
    """A published (application, version) pair."""

    app_name: str
    version: str
    path: Path


def validate_app_name(app_name: str) -> str:
    """Check that an application name is safe to use as a file name.

    Raises:
        ValueError: If the name is empty or contains path separators or
            other characters outside ``[A-Za-z0-9._-]``
    """
    if not _APP_NAME_PATTERN.match(app_name or ""):
        raise ValueError(
            f"Invalid application name: {app_name!r} "
            "(use letters, digits, '.', '_' or '-', starting with a letter or digit)"
        )
    return app_name


def manifest_url(base_url: str, app_name: str) -> str:
    """Build the URL of an application's manifest under a hosting base URL.

    Example:
        >>> manifest_url("https://example.com/versions/", "myapp")
        'https://example.com/versions/myapp.txt'
    """
    validate_app_name(app_name)
    return f"{base_url.rstrip('/')}/{app_name}{MANIFEST_SUFFIX}"


class ManifestStore:
    """Reads and publishes manifests in a local directory.

    Attributes:
        directory: Directory holding the manifest files
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, app_name: str) -> Path:
        """Return the manifest path for an application."""
        validate_app_name(app_name)
        return self.directory / f"{app_name}{MANIFEST_SUFFIX}"

    def publish(self, app_name: str, version: str) -> ManifestEntry:
        """Create or overwrite an application's manifest.

        The version is validated before anything touches the disk, and the
        file is replaced atomically so readers never see a partial write.

        Args:
            app_name: Application name
            version: Version string to publish

        Returns:
            The published entry

        Raises:
            ValueError: If the application name is invalid
            InvalidVersionFormatError: If the version is malformed
        """
        path = self.path_for(app_name)
        text = str(parse_version(version))

        self._atomic_write(path, text + "\n")
        log_message(f"Published manifest {path}: {text}")
        return ManifestEntry(app_name=app_name, version=text, path=path)

    def read(self, app_name: str) -> ManifestEntry:
        """Read an application's manifest.

        Raises:
            ManifestNotFoundError: If no manifest has been published
            InvalidVersionFormatError: If the file does not hold a valid version
        """
        path = self.path_for(app_name)
        try:
            text = path.read_text(encoding="utf-8-sig").strip()
        except FileNotFoundError:
            raise ManifestNotFoundError(app_name, path) from None

        parse_version(text)
        return ManifestEntry(app_name=app_name, version=text, path=path)

    def list_entries(self) -> list[ManifestEntry]:
        """Return every valid manifest in the directory, sorted by name."""
        if not self.directory.is_dir():
            return []

        entries: list[ManifestEntry] = []
        for path in sorted(self.directory.glob(f"*{MANIFEST_SUFFIX}")):
            app_name = path.name[: -len(MANIFEST_SUFFIX)]
            if not _APP_NAME_PATTERN.match(app_name):
                continue
            try:
                entries.append(self.read(app_name))
            except InvalidVersionFormatError as e:
                logger.warning(f"Skipping malformed manifest {path}: {e}")
        return entries

    def _atomic_write(self, target_path: Path, content: str) -> None:
        target_path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file in the same directory so the replace stays on one filesystem
        fd, temp_path = tempfile.mkstemp(
            dir=target_path.parent,
            prefix=f".{target_path.stem}-",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(temp_path, 0o644)
            Path(temp_path).replace(target_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise


__all__ = [
    "MANIFEST_SUFFIX",
    "ManifestEntry",
    "ManifestStore",
    "manifest_url",
    "validate_app_name",
]
