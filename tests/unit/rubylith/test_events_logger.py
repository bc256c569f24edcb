"""
Tests for CompatibilityLogger - structured compatibility event logging.
"""

import json
import logging
from io import StringIO

import pytest

from rubylith.compatibility.schema import CompatibilityIssue, CompatibilityResult
from rubylith.compatibility.types import CompatibilityLevel, IssueCode, IssueSeverity
from rubylith.logger import CompatibilityLogger, JsonFormatter, configure_logging


@pytest.fixture
def captured_logs():
    """Capture log output for testing."""
    return StringIO()


@pytest.fixture
def events(captured_logs):
    """Create a CompatibilityLogger that writes to captured output."""
    events_logger = logging.getLogger("rubylith.events")
    saved = list(events_logger.handlers)

    events_logger.handlers.clear()
    handler = logging.StreamHandler(captured_logs)
    handler.setFormatter(logging.Formatter("%(message)s"))
    events_logger.addHandler(handler)

    yield CompatibilityLogger(service_name="test-service")

    events_logger.handlers[:] = saved


def parse_log_line(captured_logs) -> dict:
    """Parse the last JSON log line."""
    captured_logs.seek(0)
    lines = captured_logs.read().strip().split("\n")
    if lines and lines[-1]:
        return json.loads(lines[-1])
    return {}


def _failed_result() -> CompatibilityResult:
    return CompatibilityResult(
        compatible=False,
        level=CompatibilityLevel.NONE,
        issues=[
            CompatibilityIssue(
                severity=IssueSeverity.WARNING,
                code=IssueCode.COMPONENT_TYPE_UNSUPPORTED,
                message="type",
            ),
            CompatibilityIssue(
                severity=IssueSeverity.ERROR,
                code=IssueCode.COMPONENT_BLACKLISTED,
                message="blacklisted",
            ),
        ],
        score=0,
    )


class TestCheckLogs:
    """Tests for compatibility.checked / compatibility.failed events."""

    def test_compatible_result(self, events, captured_logs):
        result = CompatibilityResult(
            compatible=True, level=CompatibilityLevel.PATCH, score=100
        )
        events.log_check("component_environment", "data-table@2.1.0", "prod", result)

        log = parse_log_line(captured_logs)
        assert log["event"] == "compatibility.checked"
        assert log["level"] == "info"
        assert log["compatibility_level"] == "patch"
        assert log["service"] == "test-service"
        assert log["check"] == "component_environment"
        assert log["subject"] == "data-table@2.1.0"
        assert log["target"] == "prod"
        assert log["score"] == 100
        assert log["issue_codes"] == []
        assert "error_codes" not in log
        assert "timestamp" in log

    def test_incompatible_result(self, events, captured_logs):
        events.log_check("component_environment", "legacy-widget@0.3.0", "prod", _failed_result())

        log = parse_log_line(captured_logs)
        assert log["event"] == "compatibility.failed"
        assert log["level"] == "warn"
        assert log["compatibility_level"] == "none"
        assert log["compatible"] is False
        assert log["issue_codes"] == ["COMPONENT_TYPE_UNSUPPORTED", "COMPONENT_BLACKLISTED"]
        assert log["error_codes"] == ["COMPONENT_BLACKLISTED"]


class TestSelectionLogs:
    def test_selection_with_best(self, events, captured_logs):
        events.log_selection("best_contract", "data-table", candidates=3, selected=2, best="1.2.0")

        log = parse_log_line(captured_logs)
        assert log["event"] == "selection.completed"
        assert log["operation"] == "best_contract"
        assert log["candidates"] == 3
        assert log["selected"] == 2
        assert log["best"] == "1.2.0"

    def test_selection_without_best(self, events, captured_logs):
        events.log_selection("batch", "prod", candidates=4, selected=0)
        assert "best" not in parse_log_line(captured_logs)


class TestLabels:
    def test_extra_labels_attached(self, captured_logs, events):
        labelled = CompatibilityLogger(extra_labels={"team": "design-system"})
        labelled.log_selection("environments", "button", candidates=1, selected=1)

        log = parse_log_line(captured_logs)
        assert log["service"] == "rubylith"
        assert log["labels"] == {"team": "design-system"}


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger("rubylith")
        saved_handlers, saved_level = list(root.handlers), root.level
        yield
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    def test_sets_level(self):
        root = configure_logging(level="debug")
        assert root.name == "rubylith"
        assert root.level == logging.DEBUG

    def test_repeated_calls_replace_handler(self):
        configure_logging()
        configure_logging(fmt="json")
        root = logging.getLogger("rubylith")
        console = [h for h in root.handlers if getattr(h, "_rubylith_console", False)]
        assert len(console) == 1
        assert isinstance(console[0].formatter, JsonFormatter)

    def test_json_formatter(self):
        record = logging.LogRecord(
            "rubylith.loader", logging.WARNING, __file__, 1, "loaded %d", (3,), None
        )
        entry = json.loads(JsonFormatter().format(record))
        assert entry["level"] == "warning"
        assert entry["logger"] == "rubylith.loader"
        assert entry["message"] == "loaded 3"
