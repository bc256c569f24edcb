"""
Semantic version parsing, precedence and increment.

Implements SemVer 2.0.0 precedence: ``major``, ``minor`` and ``patch``
compare numerically, a version with a prerelease sorts below the same
release without one, and prerelease identifiers compare numerically when
both are numeric, lexically when both are alphanumeric, with numeric
identifiers always lower.  Build metadata never affects precedence.

Usage::

    from rubylith.versioning.semver import Version, compare_versions

    v = Version.parse("1.2.3-beta.1+sha.abc")
    assert str(v) == "1.2.3-beta.1+sha.abc"
    assert compare_versions("1.2.3-beta.1", "1.2.3") == -1
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import total_ordering
from typing import Iterable, Optional, TypeVar, Union

from rubylith.versioning.errors import VersionError

_NUMERIC = r"0|[1-9][0-9]*"
_PRERELEASE_ID = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_ID = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    r"^v?"
    rf"(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?"
    r"$"
)

Identifier = Union[int, str]
VersionLike = Union[str, "Version"]
V = TypeVar("V", str, "Version")


class ReleaseType(str, Enum):
    """Release types accepted by :func:`increment_version`."""

    MAJOR = "major"
    PREMAJOR = "premajor"
    MINOR = "minor"
    PREMINOR = "preminor"
    PATCH = "patch"
    PREPATCH = "prepatch"
    PRERELEASE = "prerelease"


def _to_identifier(part: str) -> Identifier:
    return int(part) if part.isdigit() else part


def compare_identifiers(a: Identifier, b: Identifier) -> int:
    """Compare two prerelease identifiers.  Numeric sorts below alphanumeric."""
    a_num = isinstance(a, int)
    b_num = isinstance(b, int)
    if a_num and not b_num:
        return -1
    if b_num and not a_num:
        return 1
    if a == b:
        return 0
    return -1 if a < b else 1  # type: ignore[operator]


def _compare_prerelease(
    pre1: tuple[Identifier, ...], pre2: tuple[Identifier, ...]
) -> int:
    if not pre1 and not pre2:
        return 0
    if not pre1:
        return 1
    if not pre2:
        return -1
    for a, b in zip(pre1, pre2):
        result = compare_identifiers(a, b)
        if result:
            return result
    if len(pre1) == len(pre2):
        return 0
    return -1 if len(pre1) < len(pre2) else 1


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """An immutable semantic version.

    Equality and ordering follow SemVer precedence, so build metadata is
    ignored: ``Version.parse("1.0.0+a") == Version.parse("1.0.0+b")``.

    Attributes:
        major: Major component.
        minor: Minor component.
        patch: Patch component.
        prerelease: Prerelease identifiers; numeric ones are stored as ``int``.
        build: Build metadata identifiers.
    """

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: tuple[Identifier, ...] = ()
    build: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for label, value in (
            ("major", self.major),
            ("minor", self.minor),
            ("patch", self.patch),
        ):
            if not isinstance(value, int) or value < 0:
                raise VersionError(
                    f"{label} version must be a non-negative integer, got {value!r}"
                )

    @classmethod
    def parse(cls, value: VersionLike) -> Version:
        """Parse a version string.

        Surrounding whitespace and a single leading ``v`` are accepted.

        Raises:
            VersionError: If *value* is not a valid semantic version.
        """
        if isinstance(value, Version):
            return value
        if not isinstance(value, str):
            raise VersionError(
                f"Invalid version: expected a string, got {type(value).__name__}",
                version=repr(value),
            )
        match = SEMVER_PATTERN.match(value.strip())
        if match is None:
            raise VersionError(f"Invalid version: {value}", version=value)
        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(_to_identifier(p) for p in prerelease.split("."))
            if prerelease
            else (),
            build=tuple(build.split(".")) if build else (),
        )

    @property
    def release(self) -> tuple[int, int, int]:
        """The ``(major, minor, patch)`` tuple."""
        return (self.major, self.minor, self.patch)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def compare(self, other: Version) -> int:
        """Return -1, 0 or 1 by SemVer precedence."""
        if self.release != other.release:
            return -1 if self.release < other.release else 1
        return _compare_prerelease(self.prerelease, other.prerelease)

    def without_build(self) -> Version:
        return replace(self, build=())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(p) for p in self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __repr__(self) -> str:
        return f"Version({self!s})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash((self.release, self.prerelease))


# ---------------------------------------------------------------------------
# Parsing and validation
# ---------------------------------------------------------------------------


def parse_version(value: VersionLike) -> Version:
    """Parse *value* into a :class:`Version`, raising ``VersionError``."""
    return Version.parse(value)


def safe_parse_version(value: object) -> Optional[Version]:
    """Parse *value*, returning ``None`` instead of raising."""
    try:
        return Version.parse(value)  # type: ignore[arg-type]
    except VersionError:
        return None


def is_valid_version(value: object) -> bool:
    return safe_parse_version(value) is not None


def validate_version(value: str) -> str:
    """Validate and normalize a version string.

    Trims whitespace and strips a leading ``=`` or ``v`` before parsing,
    then returns the canonical form without build metadata.

    Raises:
        VersionError: If the cleaned string is not a valid version.
    """
    if not isinstance(value, str):
        raise VersionError(f"Invalid version: {value!r}", version=repr(value))
    cleaned = value.strip().lstrip("=").strip()
    try:
        return str(Version.parse(cleaned).without_build())
    except VersionError:
        raise VersionError(f"Invalid version: {value}", version=value) from None


def safe_validate_version(value: object) -> bool:
    try:
        validate_version(value)  # type: ignore[arg-type]
    except VersionError:
        return False
    return True


# ---------------------------------------------------------------------------
# Comparison and sorting
# ---------------------------------------------------------------------------


def compare_versions(a: VersionLike, b: VersionLike) -> int:
    """Compare two versions: -1 if *a* < *b*, 0 if equal, 1 if *a* > *b*."""
    return Version.parse(a).compare(Version.parse(b))


def is_greater(a: VersionLike, b: VersionLike) -> bool:
    return compare_versions(a, b) > 0


def is_greater_or_equal(a: VersionLike, b: VersionLike) -> bool:
    return compare_versions(a, b) >= 0


def is_less(a: VersionLike, b: VersionLike) -> bool:
    return compare_versions(a, b) < 0


def is_less_or_equal(a: VersionLike, b: VersionLike) -> bool:
    return compare_versions(a, b) <= 0


def is_equal(a: VersionLike, b: VersionLike) -> bool:
    return compare_versions(a, b) == 0


def sort_ascending(versions: Iterable[V]) -> list[V]:
    """Sort versions by precedence, lowest first.  Items keep their type."""
    return sorted(versions, key=Version.parse)


def sort_descending(versions: Iterable[V]) -> list[V]:
    """Sort versions by precedence, highest first.  Items keep their type."""
    return sorted(versions, key=Version.parse, reverse=True)


def latest_version(versions: Iterable[V]) -> Optional[V]:
    """Return the highest version, or ``None`` for an empty input."""
    ordered = sort_descending(versions)
    return ordered[0] if ordered else None


# ---------------------------------------------------------------------------
# Increment
# ---------------------------------------------------------------------------


def _bump_prerelease(
    prerelease: tuple[Identifier, ...], identifier: Optional[str]
) -> tuple[Identifier, ...]:
    if not prerelease:
        bumped: list[Identifier] = [0]
    else:
        bumped = list(prerelease)
        for i in range(len(bumped) - 1, -1, -1):
            if isinstance(bumped[i], int):
                bumped[i] += 1  # type: ignore[operator]
                break
        else:
            bumped.append(0)

    if identifier:
        if compare_identifiers(bumped[0], _to_identifier(identifier)) == 0:
            if len(bumped) < 2 or not isinstance(bumped[1], int):
                bumped = [identifier, 0]
        else:
            bumped = [identifier, 0]
    return tuple(bumped)


def increment_version(
    version: VersionLike,
    release_type: Union[ReleaseType, str],
    identifier: Optional[str] = None,
) -> str:
    """Increment *version* by *release_type*.

    Follows npm ``semver.inc``: bumping ``major``/``minor``/``patch`` on a
    prerelease of exactly that release drops the prerelease instead of
    bumping, and the ``pre*`` types start or advance a prerelease series
    named by *identifier*.  Build metadata is always dropped.

    Raises:
        VersionError: If *version* or *release_type* is invalid.
    """
    v = Version.parse(version).without_build()
    try:
        kind = ReleaseType(release_type)
    except ValueError:
        raise VersionError(
            f"Invalid release type '{release_type}' for version {version}",
            version=str(version),
        ) from None
    if identifier is not None and not re.fullmatch(_PRERELEASE_ID, identifier):
        raise VersionError(
            f"Invalid prerelease identifier '{identifier}'", version=str(version)
        )

    if kind is ReleaseType.MAJOR:
        major = v.major if (v.prerelease and v.minor == 0 and v.patch == 0) else v.major + 1
        v = Version(major, 0, 0)
    elif kind is ReleaseType.MINOR:
        minor = v.minor if (v.prerelease and v.patch == 0) else v.minor + 1
        v = Version(v.major, minor, 0)
    elif kind is ReleaseType.PATCH:
        patch = v.patch if v.prerelease else v.patch + 1
        v = Version(v.major, v.minor, patch)
    elif kind is ReleaseType.PREMAJOR:
        v = Version(v.major + 1, 0, 0, _bump_prerelease((), identifier))
    elif kind is ReleaseType.PREMINOR:
        v = Version(v.major, v.minor + 1, 0, _bump_prerelease((), identifier))
    elif kind is ReleaseType.PREPATCH:
        v = Version(v.major, v.minor, v.patch + 1, _bump_prerelease((), identifier))
    else:
        if not v.prerelease:
            v = Version(v.major, v.minor, v.patch + 1)
        v = replace(v, prerelease=_bump_prerelease(v.prerelease, identifier))
    return str(v)
