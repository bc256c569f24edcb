"""
OTel span event emission for compatibility checks and selections.

Each emitter logs one line and adds a span event on the current span
through ``add_span_event()``.  The checkers themselves never emit;
callers (the CLI, a service handler) decide when a result is worth a
span event.

Usage::

    from rubylith.compatibility.otel import (
        emit_compatibility_result,
        emit_compatibility_issue,
        emit_selection_result,
    )

    result = check_component_environment(component, environment)
    emit_compatibility_result("component_environment", component.name, environment.id, result)
"""

from __future__ import annotations

import logging
from typing import Optional

from rubylith._otel_helpers import AttributeValue, add_span_event
from rubylith.compatibility.schema import CompatibilityIssue, CompatibilityResult
from rubylith.compatibility.types import IssueSeverity

logger = logging.getLogger(__name__)


def emit_compatibility_result(
    check: str,
    subject: str,
    target: str,
    result: CompatibilityResult,
) -> None:
    """Emit a span event for a checker result.

    Event name: ``compatibility.check``
    """
    attrs: dict[str, AttributeValue] = {
        "compatibility.check": check,
        "compatibility.subject": subject,
        "compatibility.target": target,
        "compatibility.compatible": result.compatible,
        "compatibility.level": result.level.value,
        "compatibility.score": result.score,
        "compatibility.issue_count": len(result.issues),
        "compatibility.error_count": len(result.errors),
    }

    if result.compatible:
        logger.debug(
            "Compatibility %s: %s -> %s level=%s score=%d",
            check,
            subject,
            target,
            result.level.value,
            result.score,
        )
    else:
        logger.warning(
            "Compatibility %s FAILED: %s -> %s errors=%s",
            check,
            subject,
            target,
            ",".join(issue.code.value for issue in result.errors),
        )

    add_span_event("compatibility.check", attrs)


def emit_compatibility_issue(subject: str, issue: CompatibilityIssue) -> None:
    """Emit a span event for a single issue.

    Event name: ``compatibility.issue``
    """
    attrs: dict[str, AttributeValue] = {
        "compatibility.subject": subject,
        "compatibility.issue.code": issue.code.value,
        "compatibility.issue.severity": issue.severity.value,
        "compatibility.issue.message": issue.message,
        "compatibility.issue.field": issue.field or "",
    }

    if issue.severity == IssueSeverity.ERROR:
        logger.warning("Compatibility issue %s on %s: %s", issue.code.value, subject, issue.message)
    else:
        logger.debug("Compatibility issue %s on %s: %s", issue.code.value, subject, issue.message)

    add_span_event("compatibility.issue", attrs)


def emit_selection_result(
    operation: str,
    subject: str,
    candidates: int,
    selected: int,
    best: Optional[str] = None,
) -> None:
    """Emit a span event for a batch or ranked selection.

    Event name: ``compatibility.selection``
    """
    attrs: dict[str, AttributeValue] = {
        "selection.operation": operation,
        "selection.subject": subject,
        "selection.candidates": candidates,
        "selection.selected": selected,
        "selection.best": best or "",
    }

    logger.debug(
        "Selection %s for %s: %d/%d selected best=%s",
        operation,
        subject,
        selected,
        candidates,
        best or "-",
    )

    add_span_event("compatibility.selection", attrs)
