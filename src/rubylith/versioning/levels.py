"""
Compatibility level classification between two versions.

The classifier reduces a version pair to a coarse level used by every
compatibility checker.  Note the naming: versions that differ only in
their *minor* part classify as ``MAJOR`` and versions that differ only in
their *patch* part classify as ``MINOR``.  The level names describe how
much compatibility is left, not which semver part changed.

Levels are totally ordered by increasing confidence::

    NONE < MAJOR < MINOR < PATCH
"""

from __future__ import annotations

from enum import Enum

from rubylith.versioning.semver import Version, VersionLike


class CompatibilityLevel(str, Enum):
    """How closely two versions relate, from ``NONE`` to ``PATCH``."""

    NONE = "none"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def from_rank(cls, rank: int) -> CompatibilityLevel:
        """Map a rank back to its level; unknown ranks map to ``NONE``."""
        for level, value in _RANKS.items():
            if value == rank:
                return level
        return cls.NONE

    # str already defines lexical ordering, so all four are overridden.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CompatibilityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CompatibilityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, CompatibilityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CompatibilityLevel):
            return NotImplemented
        return self.rank >= other.rank


_RANKS: dict[CompatibilityLevel, int] = {
    CompatibilityLevel.NONE: 0,
    CompatibilityLevel.MAJOR: 1,
    CompatibilityLevel.MINOR: 2,
    CompatibilityLevel.PATCH: 3,
}

# Score awarded by ``calculate_compatibility_score`` per level
_LEVEL_SCORES: dict[CompatibilityLevel, int] = {
    CompatibilityLevel.PATCH: 100,
    CompatibilityLevel.MINOR: 75,
    CompatibilityLevel.MAJOR: 50,
    CompatibilityLevel.NONE: 0,
}


def classify(v1: VersionLike, v2: VersionLike) -> CompatibilityLevel:
    """Classify the relationship between two versions.

    Prerelease and build metadata are ignored; only the numeric release
    parts are compared.

    Raises:
        VersionError: If either version is malformed.
    """
    a = Version.parse(v1)
    b = Version.parse(v2)
    if a.major != b.major:
        return CompatibilityLevel.NONE
    if a.minor != b.minor:
        return CompatibilityLevel.MAJOR
    if a.patch != b.patch:
        return CompatibilityLevel.MINOR
    return CompatibilityLevel.PATCH


def are_compatible(v1: VersionLike, v2: VersionLike) -> bool:
    """Return whether two versions share a compatibility family."""
    return classify(v1, v2) is not CompatibilityLevel.NONE


def weakest(*levels: CompatibilityLevel) -> CompatibilityLevel:
    """Return the lowest-confidence level of *levels* (``NONE`` if empty)."""
    if not levels:
        return CompatibilityLevel.NONE
    return CompatibilityLevel.from_rank(min(level.rank for level in levels))


def calculate_compatibility_score(v1: VersionLike, v2: VersionLike) -> int:
    """Score a version pair from 0 to 100 by its compatibility level."""
    if isinstance(v1, str) and isinstance(v2, str) and v1 == v2:
        return 100
    return _LEVEL_SCORES[classify(v1, v2)]
