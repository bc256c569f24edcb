"""
Score accumulation shared by every compatibility checker.

A ``ScoreCard`` starts at 100, collects issues with their penalties and
any bonuses, and turns into a ``CompatibilityResult`` via ``finish()``.
``compatible`` is never set by a checker: it is derived from whether an
error-severity issue was recorded.  Warnings and infos lower the score
only.

Usage::

    from rubylith.compatibility.scoring import ScoreCard

    card = ScoreCard()
    card.add(IssueSeverity.WARNING, IssueCode.COMPONENT_TYPE_UNSUPPORTED,
             "plugin is not well supported", penalty=10)
    result = card.finish(CompatibilityLevel.PATCH)
"""

from __future__ import annotations

from typing import Optional

from rubylith.compatibility.schema import CompatibilityIssue, CompatibilityResult
from rubylith.compatibility.types import CompatibilityLevel, IssueCode, IssueSeverity

MAX_SCORE = 100
MIN_SCORE = 0


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


class ScoreCard:
    """Mutable accumulator for a single check; not shared between checks."""

    def __init__(self) -> None:
        self.issues: list[CompatibilityIssue] = []
        self.raw_score = MAX_SCORE

    @property
    def has_errors(self) -> bool:
        return any(i.severity == IssueSeverity.ERROR for i in self.issues)

    def add(
        self,
        severity: IssueSeverity,
        code: IssueCode,
        message: str,
        penalty: int = 0,
        field: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> CompatibilityIssue:
        """Record an issue and subtract its penalty from the running score."""
        issue = CompatibilityIssue(
            severity=severity,
            code=code,
            message=message,
            field=field,
            suggestion=suggestion,
        )
        self.issues.append(issue)
        self.raw_score -= penalty
        return issue

    def error(self, code: IssueCode, message: str, penalty: int, **kwargs) -> CompatibilityIssue:
        return self.add(IssueSeverity.ERROR, code, message, penalty, **kwargs)

    def warning(self, code: IssueCode, message: str, penalty: int, **kwargs) -> CompatibilityIssue:
        return self.add(IssueSeverity.WARNING, code, message, penalty, **kwargs)

    def bonus(self, points: int) -> None:
        self.raw_score += points

    def finish(self, level: CompatibilityLevel) -> CompatibilityResult:
        """Build the result.

        The score is clamped to ``[0, 100]`` and *level* is replaced by
        ``NONE`` when any error-severity issue was recorded.
        """
        compatible = not self.has_errors
        return CompatibilityResult(
            compatible=compatible,
            level=level if compatible else CompatibilityLevel.NONE,
            issues=list(self.issues),
            score=clamp_score(self.raw_score),
        )

    @classmethod
    def rejected(
        cls,
        code: IssueCode,
        message: str,
        field: Optional[str] = None,
    ) -> CompatibilityResult:
        """A short-circuit result: one error, level ``NONE``, score 0."""
        card = cls()
        card.error(code, message, penalty=MAX_SCORE, field=field)
        return card.finish(CompatibilityLevel.NONE)
