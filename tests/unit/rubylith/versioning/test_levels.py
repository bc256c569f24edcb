"""Tests for compatibility level classification."""

from __future__ import annotations

import pytest

from rubylith.versioning.errors import VersionError
from rubylith.versioning.levels import (
    CompatibilityLevel,
    are_compatible,
    calculate_compatibility_score,
    classify,
    weakest,
)


class TestClassify:
    @pytest.mark.parametrize(
        "v1, v2, expected",
        [
            ("1.2.3", "2.2.3", CompatibilityLevel.NONE),
            ("1.2.3", "1.3.3", CompatibilityLevel.MAJOR),
            ("1.2.3", "1.2.4", CompatibilityLevel.MINOR),
            ("1.2.3", "1.2.3", CompatibilityLevel.PATCH),
            ("1.2.3-beta", "1.2.3+build", CompatibilityLevel.PATCH),
            ("0.1.0", "0.2.0", CompatibilityLevel.MAJOR),
        ],
    )
    def test_levels(self, v1, v2, expected):
        assert classify(v1, v2) is expected

    def test_symmetric(self):
        assert classify("1.0.0", "1.4.0") is classify("1.4.0", "1.0.0")

    @pytest.mark.parametrize("v", ["0.0.0", "1.2.3", "3.0.0-rc.1"])
    def test_identity_is_patch(self, v):
        assert classify(v, v) is CompatibilityLevel.PATCH

    def test_invalid_raises(self):
        with pytest.raises(VersionError):
            classify("1.0.0", "1.0")


class TestAreCompatible:
    def test_differing_major_never_compatible(self):
        assert are_compatible("1.0.0", "2.0.0") is False
        assert are_compatible("2.9.9", "1.0.0") is False

    def test_same_major(self):
        assert are_compatible("1.0.0", "1.9.0") is True


class TestLevelOrdering:
    def test_total_order(self):
        assert (
            CompatibilityLevel.NONE
            < CompatibilityLevel.MAJOR
            < CompatibilityLevel.MINOR
            < CompatibilityLevel.PATCH
        )
        assert CompatibilityLevel.PATCH >= CompatibilityLevel.MINOR
        assert CompatibilityLevel.NONE <= CompatibilityLevel.NONE
        assert CompatibilityLevel.MINOR > CompatibilityLevel.MAJOR

    def test_rank_round_trip(self):
        for level in CompatibilityLevel:
            assert CompatibilityLevel.from_rank(level.rank) is level
        assert CompatibilityLevel.from_rank(42) is CompatibilityLevel.NONE

    def test_wire_values(self):
        assert [level.value for level in CompatibilityLevel] == ["none", "major", "minor", "patch"]

    def test_weakest(self):
        assert weakest(CompatibilityLevel.PATCH, CompatibilityLevel.MAJOR) is CompatibilityLevel.MAJOR
        assert weakest(CompatibilityLevel.MINOR) is CompatibilityLevel.MINOR
        assert weakest() is CompatibilityLevel.NONE


class TestScore:
    @pytest.mark.parametrize(
        "v1, v2, expected",
        [
            ("1.0.0", "1.0.0", 100),
            ("1.0.0", "1.0.0+build", 100),
            ("1.0.0", "1.0.1", 75),
            ("1.0.0", "1.1.0", 50),
            ("1.0.0", "2.0.0", 0),
        ],
    )
    def test_scores(self, v1, v2, expected):
        assert calculate_compatibility_score(v1, v2) == expected
