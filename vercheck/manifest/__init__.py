"""Manifest publishing, fetching and update checks.

This package contains:
- store: ManifestStore for publishing and reading manifest files
- fetcher: HTTP and file manifest sources
- checker: Update check orchestration
"""

from vercheck.manifest.checker import (
    UpdateCheckResult,
    UpdateChecker,
    UpdateStatus,
    check_for_update,
)
from vercheck.manifest.fetcher import (
    DEFAULT_TIMEOUT_SECONDS,
    FileManifestSource,
    HttpManifestSource,
    ManifestSource,
    source_for,
)
from vercheck.manifest.store import (
    MANIFEST_SUFFIX,
    ManifestEntry,
    ManifestStore,
    manifest_url,
    validate_app_name,
)

__all__ = [
    # Store
    "MANIFEST_SUFFIX",
    "ManifestEntry",
    "ManifestStore",
    "manifest_url",
    "validate_app_name",
    # Fetcher
    "DEFAULT_TIMEOUT_SECONDS",
    "ManifestSource",
    "HttpManifestSource",
    "FileManifestSource",
    "source_for",
    # Checker
    "UpdateStatus",
    "UpdateCheckResult",
    "UpdateChecker",
    "check_for_update",
]
