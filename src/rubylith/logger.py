"""
Structured logging for compatibility events.

Outputs one JSON object per line on the ``rubylith.events`` logger so
that check outcomes can be shipped and queried alongside service logs.
Only outcomes are logged; individual issues go to span events
(see ``rubylith.compatibility.otel``).

Logged events:
- compatibility.checked (compatible result)
- compatibility.failed (incompatible result, logged at warn)
- selection.completed (batch check, environment ranking, contract pick)

``configure_logging()`` sets up the ``rubylith`` logger hierarchy for
the command line, as plain text or JSON lines.

Usage:
    from rubylith.logger import CompatibilityLogger

    events = CompatibilityLogger(service_name="registry-api")
    events.log_check("component_environment", "button@1.2.0", "prod", result)
    events.log_selection("environments", "button@1.2.0", candidates=4, selected=2)
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rubylith.compatibility.schema import CompatibilityResult

# Structured event logger; its lines are already JSON
_events_logger = logging.getLogger("rubylith.events")
_events_logger.setLevel(logging.INFO)
_events_logger.propagate = False

# Default handler writes to stderr so stdout stays free for command output
if not _events_logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    _events_logger.addHandler(handler)


class JsonFormatter(logging.Formatter):
    """Render regular log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "info", fmt: str = "text") -> logging.Logger:
    """
    Configure the ``rubylith`` logger for console use.

    Replaces any handler previously installed by this function, so it
    is safe to call more than once.

    Args:
        level: debug, info, warning or error
        fmt: "text" for human-readable lines, "json" for JSON lines

    Returns:
        The configured ``rubylith`` logger
    """
    root = logging.getLogger("rubylith")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for existing in list(root.handlers):
        if getattr(existing, "_rubylith_console", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler._rubylith_console = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root


class CompatibilityLogger:
    """
    Structured logger for compatibility events.

    Each log entry includes standard fields for filtering:
    - event, service, check kind
    - subject and target of the check
    - outcome fields (compatible, compatibility_level, score, issue codes)
    """

    def __init__(
        self,
        service_name: str = "rubylith",
        extra_labels: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the event logger.

        Args:
            service_name: Service name for log attribution
            extra_labels: Additional labels attached to every entry
        """
        self.service_name = service_name
        self.extra_labels = extra_labels or {}
        self._logger = _events_logger

    def _emit(self, event: str, level: str = "info", **fields: Any) -> None:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "event": event,
            "service": self.service_name,
        }
        entry.update(fields)
        if self.extra_labels:
            entry["labels"] = self.extra_labels

        log_line = json.dumps(entry, default=str)

        if level == "error":
            self._logger.error(log_line)
        elif level == "warn":
            self._logger.warning(log_line)
        else:
            self._logger.info(log_line)

    def log_check(
        self,
        check: str,
        subject: str,
        target: str,
        result: CompatibilityResult,
    ) -> None:
        """
        Log the outcome of a compatibility check.

        Compatible results are logged as ``compatibility.checked``;
        incompatible ones as ``compatibility.failed`` at warn level with
        their error codes.
        """
        fields: Dict[str, Any] = {
            "check": check,
            "subject": subject,
            "target": target,
            "compatible": result.compatible,
            "compatibility_level": result.level.value,
            "score": result.score,
            "issue_codes": [issue.code.value for issue in result.issues],
        }
        if result.compatible:
            self._emit("compatibility.checked", **fields)
        else:
            fields["error_codes"] = [issue.code.value for issue in result.errors]
            self._emit("compatibility.failed", level="warn", **fields)

    def log_selection(
        self,
        operation: str,
        subject: str,
        candidates: int,
        selected: int,
        best: Optional[str] = None,
    ) -> None:
        """Log the outcome of a batch check or ranked selection."""
        fields: Dict[str, Any] = {
            "operation": operation,
            "subject": subject,
            "candidates": candidates,
            "selected": selected,
        }
        if best:
            fields["best"] = best
        self._emit("selection.completed", **fields)
