"""Semantic version handling for VERCHECK."""

from vercheck.version.semver import (
    Ordering,
    Version,
    compare_versions,
    is_newer,
    parse_version,
)

__all__ = [
    "Ordering",
    "Version",
    "compare_versions",
    "is_newer",
    "parse_version",
]
