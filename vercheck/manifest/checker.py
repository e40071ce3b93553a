"""Update check: compare a running version against a published manifest.

The check is a single linear request/response: parse the current version,
fetch the manifest, strip it, compare. There is no caching and no retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from vercheck.manifest.fetcher import ManifestSource
from vercheck.utils.logging import log_message
from vercheck.version import Ordering, compare_versions, parse_version

logger = logging.getLogger(__name__)


class UpdateStatus(Enum):
    UPDATE_AVAILABLE = "update_available"
    UP_TO_DATE = "up_to_date"


@dataclass(frozen=True)
class UpdateCheckResult:
    """Outcome of one update check.

    Attributes:
        status: Whether the manifest advertises a newer version
        current_version: Version the caller is running
        remote_version: Version found in the manifest (stripped)
        source: URL or path the manifest was read from
    """

    status: UpdateStatus
    current_version: str
    remote_version: str
    source: str = ""

    @property
    def update_available(self) -> bool:
        return self.status is UpdateStatus.UPDATE_AVAILABLE

    @property
    def message(self) -> str:
        if self.update_available:
            return f"update available, {self.remote_version}"
        return "up to date"


def check_for_update(source: ManifestSource, current_version: str) -> UpdateCheckResult:
    """Fetch a manifest and decide whether an update is available.

    The current version is validated before any network access, so a bad
    local version never triggers a request.

    Args:
        source: Where to fetch the manifest text from
        current_version: Version the caller is running

    Returns:
        UpdateCheckResult describing the outcome. A manifest older than the
        current version counts as up to date.

    Raises:
        InvalidVersionFormatError: If either version is malformed
        FetchFailedError: If the manifest cannot be retrieved
    """
    current = parse_version(current_version)
    location = getattr(source, "location", "")

    remote_text = source.fetch_text().strip()
    remote = parse_version(remote_text)

    ordering = compare_versions(remote, current)
    if ordering is Ordering.GREATER:
        status = UpdateStatus.UPDATE_AVAILABLE
    else:
        status = UpdateStatus.UP_TO_DATE
        if ordering is Ordering.LESS:
            logger.warning(
                f"Manifest at {location or 'source'} ({remote_text}) is older than "
                f"running version {current_version.strip()}"
            )

    result = UpdateCheckResult(
        status=status,
        current_version=current_version.strip(),
        remote_version=remote_text,
        source=location,
    )
    log_message(f"Update check against {location or 'source'}: {result.message}")
    return result


class UpdateChecker:
    """Reusable update check bound to one manifest source."""

    def __init__(self, source: ManifestSource) -> None:
        self.source = source

    def check(self, current_version: str) -> UpdateCheckResult:
        """Run the update check. See :func:`check_for_update`."""
        return check_for_update(self.source, current_version)


__all__ = [
    "UpdateStatus",
    "UpdateCheckResult",
    "UpdateChecker",
    "check_for_update",
]
