"""Semantic version parsing and ordering.

Versions have the form ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]``. Core
components are compared numerically, so ``0.1.10`` sorts after ``0.1.9``
and ``10.0.0`` after ``2.0.0``. Build metadata is carried along for display
but never affects ordering or equality.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering

from vercheck.utils.errors import InvalidVersionFormatError

_CORE_PART = re.compile(r"[0-9]+")
_IDENTIFIER = re.compile(r"[0-9A-Za-z-]+")


class Ordering(Enum):
    """Result of comparing two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    @classmethod
    def from_int(cls, value: int) -> Ordering:
        if value < 0:
            return cls.LESS
        if value > 0:
            return cls.GREATER
        return cls.EQUAL

    @property
    def symbol(self) -> str:
        """Comparison operator for display (``<``, ``=`` or ``>``)."""
        return {Ordering.LESS: "<", Ordering.EQUAL: "=", Ordering.GREATER: ">"}[self]


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed semantic version.

    Attributes:
        major: Incompatible-change counter
        minor: Additive-change counter
        patch: Fix counter
        prerelease: Dot-separated pre-release identifiers (empty for releases)
        build: Dot-separated build metadata identifiers (ignored for ordering)
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = field(default_factory=tuple)
    build: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string. See :func:`parse_version`."""
        return parse_version(text)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return _compare(self, other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return _compare(self, other) < 0

    def __hash__(self) -> int:
        # Numeric identifiers compare by value, so "01" and "1" must hash alike
        prerelease = tuple(int(p) if p.isdigit() else p for p in self.prerelease)
        return hash((self.core, prerelease))


def parse_version(text: str) -> Version:
    """Parse ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]`` into a Version.

    Surrounding whitespace and a single leading ``v``/``V`` are accepted.

    Args:
        text: Version string to parse

    Returns:
        The parsed Version

    Raises:
        InvalidVersionFormatError: If the text is not a valid version
    """
    if not isinstance(text, str):
        raise InvalidVersionFormatError(repr(text), "expected a string")

    raw = text
    text = text.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    if not text:
        raise InvalidVersionFormatError(raw, "empty version string")

    text, has_build, build_text = text.partition("+")
    text, has_prerelease, prerelease_text = text.partition("-")

    parts = text.split(".")
    if len(parts) != 3:
        raise InvalidVersionFormatError(
            raw, f"expected MAJOR.MINOR.PATCH, got {len(parts)} component(s)"
        )
    for part in parts:
        if not _CORE_PART.fullmatch(part):
            raise InvalidVersionFormatError(raw, f"non-numeric component {part!r}")

    prerelease = _split_identifiers(raw, prerelease_text, "pre-release") if has_prerelease else ()
    build = _split_identifiers(raw, build_text, "build metadata") if has_build else ()

    major, minor, patch = (int(p) for p in parts)
    return Version(major, minor, patch, prerelease, build)


def _split_identifiers(raw: str, text: str, label: str) -> tuple[str, ...]:
    identifiers = tuple(text.split("."))
    for identifier in identifiers:
        if not identifier:
            raise InvalidVersionFormatError(raw, f"empty {label} identifier")
        if not _IDENTIFIER.fullmatch(identifier):
            raise InvalidVersionFormatError(raw, f"invalid {label} identifier {identifier!r}")
    return identifiers


def _compare_prerelease(left: tuple[str, ...], right: tuple[str, ...]) -> int:
    # A release (no identifiers) outranks any of its pre-releases.
    if not left and not right:
        return 0
    if not left:
        return 1
    if not right:
        return -1

    for a, b in zip(left, right):
        a_numeric = a.isdigit()
        b_numeric = b.isdigit()
        if a_numeric and b_numeric:
            diff = int(a) - int(b)
            if diff:
                return diff
        elif a_numeric:
            return -1
        elif b_numeric:
            return 1
        elif a != b:
            return -1 if a < b else 1

    return len(left) - len(right)


def _compare(left: Version, right: Version) -> int:
    if left.core != right.core:
        return -1 if left.core < right.core else 1
    return _compare_prerelease(left.prerelease, right.prerelease)


def _coerce(value: str | Version) -> Version:
    if isinstance(value, Version):
        return value
    return parse_version(value)


def compare_versions(a: str | Version, b: str | Version) -> Ordering:
    """Order two versions by semantic versioning precedence.

    Args:
        a: First version (string or Version)
        b: Second version (string or Version)

    Returns:
        Ordering.LESS, Ordering.EQUAL or Ordering.GREATER for ``a`` relative to ``b``

    Raises:
        InvalidVersionFormatError: If either string is malformed
    """
    return Ordering.from_int(_compare(_coerce(a), _coerce(b)))


def is_newer(candidate: str | Version, current: str | Version) -> bool:
    """Return True if ``candidate`` is strictly newer than ``current``."""
    return compare_versions(candidate, current) is Ordering.GREATER


__all__ = [
    "Ordering",
    "Version",
    "parse_version",
    "compare_versions",
    "is_newer",
]
