"""Tests for ScoreCard and result invariants."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rubylith.compatibility.schema import CompatibilityIssue, CompatibilityResult
from rubylith.compatibility.scoring import ScoreCard, clamp_score
from rubylith.compatibility.types import CompatibilityLevel, IssueCode, IssueSeverity


class TestClampScore:
    @pytest.mark.parametrize("raw, expected", [(-250, 0), (0, 0), (55, 55), (100, 100), (140, 100)])
    def test_clamp(self, raw, expected):
        assert clamp_score(raw) == expected


class TestScoreCard:
    def test_empty_card(self):
        result = ScoreCard().finish(CompatibilityLevel.MINOR)
        assert result.compatible is True
        assert result.level is CompatibilityLevel.MINOR
        assert result.score == 100
        assert result.issues == []

    def test_warning_keeps_compatible(self):
        card = ScoreCard()
        card.warning(IssueCode.RUNTIME_FRAMEWORK_CHANGE, "changed", penalty=20)
        result = card.finish(CompatibilityLevel.PATCH)
        assert result.compatible is True
        assert result.level is CompatibilityLevel.PATCH
        assert result.score == 80

    def test_info_keeps_compatible(self):
        card = ScoreCard()
        card.add(IssueSeverity.INFO, IssueCode.BREAKING_CHANGES_PRESENT, "note", penalty=5)
        assert card.finish(CompatibilityLevel.PATCH).compatible is True

    def test_error_forces_level_none(self):
        card = ScoreCard()
        card.error(IssueCode.VERSION_INCOMPATIBLE, "bad", penalty=50, field="version")
        result = card.finish(CompatibilityLevel.PATCH)
        assert result.compatible is False
        assert result.level is CompatibilityLevel.NONE
        assert result.issues[0].field == "version"
        assert result.score == 50

    def test_penalties_clamped_at_zero(self):
        card = ScoreCard()
        for _ in range(5):
            card.error(IssueCode.MISSING_CAPABILITIES, "missing", penalty=40)
        assert card.finish(CompatibilityLevel.PATCH).score == 0

    def test_bonus_clamped_at_hundred(self):
        card = ScoreCard()
        card.bonus(10)
        assert card.raw_score == 110
        assert card.finish(CompatibilityLevel.MAJOR).score == 100

    def test_rejected(self):
        result = ScoreCard.rejected(IssueCode.CONTRACT_NAME_MISMATCH, "renamed")
        assert result.compatible is False
        assert result.score == 0
        assert result.level is CompatibilityLevel.NONE
        assert [i.code for i in result.issues] == [IssueCode.CONTRACT_NAME_MISMATCH]

    def test_finish_copies_issues(self):
        card = ScoreCard()
        first = card.finish(CompatibilityLevel.PATCH)
        card.warning(IssueCode.COMPONENT_TYPE_UNSUPPORTED, "late", penalty=10)
        assert first.issues == []


class TestCompatibilityResultInvariant:
    def _error(self) -> CompatibilityIssue:
        return CompatibilityIssue(
            severity=IssueSeverity.ERROR, code=IssueCode.CONTRACT_MISMATCH, message="x"
        )

    def test_compatible_with_error_rejected(self):
        with pytest.raises(ValidationError):
            CompatibilityResult(
                compatible=True, level="patch", issues=[self._error()], score=50
            )

    def test_incompatible_without_error_rejected(self):
        with pytest.raises(ValidationError):
            CompatibilityResult(compatible=False, level="none", issues=[], score=0)

    @pytest.mark.parametrize("score", [-1, 101])
    def test_score_bounds(self, score):
        with pytest.raises(ValidationError):
            CompatibilityResult(compatible=True, level="patch", score=score)

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            CompatibilityResult(compatible=True, level="patch", score=100, note="x")

    def test_frozen(self):
        result = CompatibilityResult(compatible=True, level="patch", score=100)
        with pytest.raises(ValidationError):
            result.score = 10

    def test_json_dump_uses_wire_values(self):
        result = CompatibilityResult(
            compatible=False, level="none", issues=[self._error()], score=50
        )
        dumped = result.model_dump(mode="json")
        assert dumped["level"] == "none"
        assert dumped["issues"][0]["severity"] == "error"
        assert dumped["issues"][0]["code"] == "CONTRACT_MISMATCH"
