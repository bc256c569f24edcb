"""
Shared OTel span event emission helper.

Provides ``add_span_event()``, used by every ``otel.py`` module in the
package so the span recording check lives in one place.

Usage::

    from rubylith._otel_helpers import add_span_event

    add_span_event("compatibility.check", {"compatibility.score": 90})
"""

from __future__ import annotations

from typing import Union

from opentelemetry import trace as otel_trace

AttributeValue = Union[str, int, float, bool]


def add_span_event(name: str, attributes: dict[str, AttributeValue]) -> None:
    """Add an event to the current span.

    No-op when the current span is not recording (no SDK configured, or
    the span was sampled out).

    Args:
        name: Event name (e.g. ``"compatibility.check"``).
        attributes: Flat dict of span event attributes.
    """
    span = otel_trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name=name, attributes=attributes)
