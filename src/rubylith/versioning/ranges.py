"""
Version ranges: parsed predicates over :class:`Version`.

Range syntax follows the npm ``semver`` package:

- comparators: ``>1.2.3``, ``>=1.2.3``, ``<1.2.3``, ``<=1.2.3``, ``=1.2.3``
  and bare ``1.2.3``
- caret ``^1.2.3`` (``>=1.2.3 <2.0.0-0``; the leftmost non-zero part is fixed)
- tilde ``~1.2.3`` (``>=1.2.3 <1.3.0-0``)
- x-ranges ``1.x``, ``1.2.*``, ``1``, ``*`` and the empty string
- hyphen ranges ``1.2.3 - 2.3.4``
- whitespace (or comma) separated comparators are intersected, and
  ``||`` separates alternatives

A prerelease version only satisfies a comparator set in which some
comparator names the same ``major.minor.patch`` with a prerelease, so
``^1.2.0`` does not match ``1.3.0-beta`` while ``>=1.3.0-alpha`` does.

Usage::

    from rubylith.versioning.ranges import VersionRange, satisfies

    assert satisfies("1.4.0", "^1.2.0")
    assert str(VersionRange.parse("~1.2")) == ">=1.2.0 <1.3.0-0"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from rubylith.versioning.errors import VersionError
from rubylith.versioning.semver import (
    V,
    Version,
    VersionLike,
    _BUILD_ID,
    _PRERELEASE_ID,
)

_XR = r"0|[1-9][0-9]*|[xX*]"
_PARTIAL_PATTERN = re.compile(
    r"^v?"
    rf"(?P<major>{_XR})"
    rf"(?:\.(?P<minor>{_XR})"
    rf"(?:\.(?P<patch>{_XR})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?"
    r")?)?$"
)
_TOKEN_PATTERN = re.compile(r"^(?P<op>~>|~|\^|>=|<=|>|<|=)?(?P<version>.*)$")
_HYPHEN_PATTERN = re.compile(r"^\s*(?P<start>\S+)\s+-\s+(?P<end>\S+)\s*$")
_OPERATOR_SPACE = re.compile(r"(~>|~|\^|>=|<=|>|<|=)\s+")

RangeLike = Union[str, "VersionRange"]

# Comparator operators
ANY = ""
EQ = "="
GT = ">"
GTE = ">="
LT = "<"
LTE = "<="


@dataclass(frozen=True)
class Comparator:
    """A single ``operator version`` test.  ``operator == ANY`` matches everything."""

    operator: str
    version: Optional[Version] = None

    def test(self, version: Version) -> bool:
        if self.operator == ANY or self.version is None:
            return True
        cmp = version.compare(self.version)
        if self.operator == EQ:
            return cmp == 0
        if self.operator == GT:
            return cmp > 0
        if self.operator == GTE:
            return cmp >= 0
        if self.operator == LT:
            return cmp < 0
        if self.operator == LTE:
            return cmp <= 0
        raise VersionError(f"Unknown comparator operator '{self.operator}'")

    def __str__(self) -> str:
        if self.operator == ANY or self.version is None:
            return ""
        if self.operator == EQ:
            return str(self.version.without_build())
        return f"{self.operator}{self.version.without_build()}"


_MATCH_ANY = Comparator(ANY)
_MATCH_NONE = Comparator(LT, Version(0, 0, 0, (0,)))


@dataclass(frozen=True)
class _Partial:
    """A possibly incomplete version such as ``1``, ``1.2.x`` or ``*``."""

    major: Optional[int]
    minor: Optional[int]
    patch: Optional[int]
    prerelease: tuple[Union[int, str], ...] = ()

    @property
    def is_any(self) -> bool:
        return self.major is None

    def floor(self) -> Version:
        return Version(
            self.major or 0,
            self.minor or 0,
            self.patch or 0,
            self.prerelease if self.patch is not None else (),
        )


def _parse_partial(text: str, raw: str) -> _Partial:
    match = _PARTIAL_PATTERN.match(text)
    if match is None:
        raise VersionError(f"Invalid version range: {raw}", range=raw)

    def part(name: str) -> Optional[int]:
        value = match.group(name)
        if value is None or value in ("x", "X", "*"):
            return None
        return int(value)

    major, minor, patch = part("major"), part("minor"), part("patch")
    # Anything after a wildcard is a wildcard too: ``1.x.3`` means ``1.x``.
    if major is None:
        minor = patch = None
    elif minor is None:
        patch = None
    prerelease = match.group("prerelease")
    return _Partial(
        major,
        minor,
        patch,
        tuple(int(p) if p.isdigit() else p for p in prerelease.split("."))
        if prerelease and patch is not None
        else (),
    )


def _upper_bound(major: int, minor: int = 0, patch: int = 0) -> Comparator:
    # ``-0`` keeps prereleases of the excluded release out of the range.
    return Comparator(LT, Version(major, minor, patch, (0,)))


def _x_range(p: _Partial) -> list[Comparator]:
    if p.is_any:
        return [_MATCH_ANY]
    if p.minor is None:
        return [Comparator(GTE, p.floor()), _upper_bound(p.major + 1)]
    if p.patch is None:
        return [Comparator(GTE, p.floor()), _upper_bound(p.major, p.minor + 1)]
    return [Comparator(EQ, p.floor())]


def _tilde(p: _Partial) -> list[Comparator]:
    if p.is_any:
        return [_MATCH_ANY]
    if p.minor is None:
        return [Comparator(GTE, p.floor()), _upper_bound(p.major + 1)]
    return [Comparator(GTE, p.floor()), _upper_bound(p.major, p.minor + 1)]


def _caret(p: _Partial) -> list[Comparator]:
    if p.is_any:
        return [_MATCH_ANY]
    floor = Comparator(GTE, p.floor())
    if p.minor is None:
        return [floor, _upper_bound(p.major + 1)]
    if p.major > 0:
        return [floor, _upper_bound(p.major + 1)]
    if p.patch is None:
        if p.minor > 0:
            return [floor, _upper_bound(0, p.minor + 1)]
        return [floor, _upper_bound(0, 1)]
    if p.minor > 0:
        return [floor, _upper_bound(0, p.minor + 1)]
    return [floor, _upper_bound(0, 0, p.patch + 1)]


def _primitive(op: str, p: _Partial) -> list[Comparator]:
    if op == EQ:
        return _x_range(p)
    if p.is_any:
        # ``>*`` and ``<*`` can never match; ``>=*`` and ``<=*`` always do.
        return [_MATCH_NONE] if op in (GT, LT) else [_MATCH_ANY]
    if p.patch is not None:
        return [Comparator(op, p.floor())]
    # Partial versions move to the edge of the range they describe.
    if op == GT:
        if p.minor is None:
            return [Comparator(GTE, Version(p.major + 1, 0, 0))]
        return [Comparator(GTE, Version(p.major, p.minor + 1, 0))]
    if op == LTE:
        if p.minor is None:
            return [_upper_bound(p.major + 1)]
        return [_upper_bound(p.major, p.minor + 1)]
    if op == LT:
        return [Comparator(LT, Version(p.major, p.minor or 0, 0, (0,)))]
    return [Comparator(GTE, p.floor())]


def _hyphen(start: _Partial, end: _Partial) -> list[Comparator]:
    comparators: list[Comparator] = []
    if not start.is_any:
        comparators.append(Comparator(GTE, start.floor()))
    if end.is_any:
        pass
    elif end.minor is None:
        comparators.append(_upper_bound(end.major + 1))
    elif end.patch is None:
        comparators.append(_upper_bound(end.major, end.minor + 1))
    else:
        comparators.append(Comparator(LTE, end.floor()))
    return comparators or [_MATCH_ANY]


def _parse_token(token: str, raw: str) -> list[Comparator]:
    match = _TOKEN_PATTERN.match(token)
    op = (match.group("op") if match else None) or EQ
    partial = _parse_partial(match.group("version") if match else token, raw)
    if op in ("~", "~>"):
        return _tilde(partial)
    if op == "^":
        return _caret(partial)
    return _primitive(op, partial)


def _parse_set(text: str, raw: str) -> tuple[Comparator, ...]:
    text = text.strip()
    hyphen = _HYPHEN_PATTERN.match(text)
    if hyphen:
        return tuple(
            _hyphen(
                _parse_partial(hyphen.group("start"), raw),
                _parse_partial(hyphen.group("end"), raw),
            )
        )
    text = _OPERATOR_SPACE.sub(r"\1", text)
    tokens = [t for t in re.split(r"[\s,]+", text) if t]
    if not tokens:
        return (_MATCH_ANY,)
    comparators: list[Comparator] = []
    for token in tokens:
        comparators.extend(_parse_token(token, raw))
    if _MATCH_NONE in comparators:
        return (_MATCH_NONE,)
    meaningful = [c for c in comparators if c.operator != ANY]
    return tuple(meaningful) if meaningful else (_MATCH_ANY,)


def _test_set(comparators: tuple[Comparator, ...], version: Version) -> bool:
    if not all(c.test(version) for c in comparators):
        return False
    if not version.prerelease:
        return True
    # A prerelease only matches when a comparator opts into that release's
    # prerelease series explicitly.
    return any(
        c.version is not None
        and c.version.prerelease
        and c.version.release == version.release
        for c in comparators
    )


@dataclass(frozen=True)
class VersionRange:
    """A parsed range: a union (``||``) of comparator intersections.

    Attributes:
        raw: The range string as authored.
        sets: Alternatives; a version satisfies the range when it passes
            every comparator of at least one set.
    """

    raw: str
    sets: tuple[tuple[Comparator, ...], ...]

    @classmethod
    def parse(cls, value: RangeLike) -> VersionRange:
        """Parse a range string.

        Raises:
            VersionError: If any part of *value* is not valid range syntax.
        """
        if isinstance(value, VersionRange):
            return value
        if not isinstance(value, str):
            raise VersionError(
                f"Invalid version range: expected a string, got {type(value).__name__}",
                range=repr(value),
            )
        sets = tuple(_parse_set(part, value) for part in value.split("||"))
        return cls(raw=value, sets=sets)

    def satisfied_by(self, version: VersionLike) -> bool:
        v = Version.parse(version)
        return any(_test_set(s, v) for s in self.sets)

    def __contains__(self, version: object) -> bool:
        if not isinstance(version, (str, Version)):
            return False
        return self.satisfied_by(version)

    def __str__(self) -> str:
        rendered = []
        for comparators in self.sets:
            text = " ".join(str(c) for c in comparators).strip()
            rendered.append(text or "*")
        return " || ".join(rendered)


# ---------------------------------------------------------------------------
# Functional API
# ---------------------------------------------------------------------------


def parse_range(value: RangeLike) -> VersionRange:
    return VersionRange.parse(value)


def satisfies(version: VersionLike, range_: RangeLike) -> bool:
    """Return whether *version* satisfies *range_*.

    Raises:
        VersionError: If the version or the range is malformed.
    """
    return VersionRange.parse(range_).satisfied_by(version)


def safe_satisfies_range(version: object, range_: object) -> bool:
    """Like :func:`satisfies`, but malformed input yields ``False``."""
    try:
        return satisfies(version, range_)  # type: ignore[arg-type]
    except VersionError:
        return False


def is_valid_version_range(value: object) -> bool:
    try:
        VersionRange.parse(value)  # type: ignore[arg-type]
    except VersionError:
        return False
    return True


def validate_version_range(value: str) -> str:
    """Validate a range and return its normalized comparator form.

    Raises:
        VersionError: If *value* is not a valid range.
    """
    return str(VersionRange.parse(value))


def filter_satisfying(versions: Iterable[V], range_: RangeLike) -> list[V]:
    """Return the versions that satisfy *range_*, in input order.

    Candidates that are not valid versions are skipped; a malformed
    *range_* still raises ``VersionError``.
    """
    parsed = VersionRange.parse(range_)
    return [v for v in versions if _satisfied_or_skip(parsed, v)]


def _satisfied_or_skip(parsed: VersionRange, version: object) -> bool:
    try:
        return parsed.satisfied_by(version)  # type: ignore[arg-type]
    except VersionError:
        return False


def max_satisfying(versions: Iterable[V], range_: RangeLike) -> Optional[V]:
    """Return the highest version satisfying *range_*, or ``None``."""
    matching = filter_satisfying(versions, range_)
    return max(matching, key=Version.parse) if matching else None


def min_satisfying(versions: Iterable[V], range_: RangeLike) -> Optional[V]:
    """Return the lowest version satisfying *range_*, or ``None``."""
    matching = filter_satisfying(versions, range_)
    return min(matching, key=Version.parse) if matching else None


# ---------------------------------------------------------------------------
# Range builders
# ---------------------------------------------------------------------------


def caret_range(version: VersionLike) -> str:
    return f"^{version}"


def tilde_range(version: VersionLike) -> str:
    return f"~{version}"


def exact_range(version: VersionLike) -> str:
    return str(version)


def min_range(version: VersionLike) -> str:
    return f">={version}"


def max_range(version: VersionLike) -> str:
    return f"<{version}"
