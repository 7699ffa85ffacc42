"""Exceptions raised at the event boundary.

The engine itself never raises for handled anomalies (stale updates, unknown
ids, duplicates, missing metadata). These exceptions cover payloads that fail
validation before they can be dispatched.
"""

from __future__ import annotations


class TimelineError(RuntimeError):
    """Base exception for timeline engine failures."""


class EventPayloadError(TimelineError, ValueError):
    """Raised when an inbound event payload does not match any event schema.

    The originating pydantic ``ValidationError`` is kept as ``__cause__``.
    """


class UnknownEventError(EventPayloadError):
    """Raised when an inbound payload carries an unrecognised ``type`` tag."""

    def __init__(self, event_type: object) -> None:
        super().__init__(f"Unknown event type: {event_type!r}")
        self.event_type = event_type
