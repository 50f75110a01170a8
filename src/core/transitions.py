"""Fixed status transition tables and the timeline events they produce.

A :class:`TransitionTable` is a directed adjacency map ``status -> allowed
next statuses``. It never touches the database: callers load the entity,
ask the table for an event, then persist the new status together with the
appended timeline entry.
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from django.utils import timezone


class InvalidTransition(ValueError):
    """Raised when a requested status is not reachable from the current one."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot transition from {current} to {requested}")


class TransitionTable:
    """Allow-list of status changes for one entity type."""

    def __init__(self, name: str, edges: Mapping[str, Iterable[str]]):
        self.name = name
        self._edges = {str(src): frozenset(str(dst) for dst in dsts) for src, dsts in edges.items()}

    def allowed_from(self, current: str) -> frozenset[str]:
        return self._edges.get(str(current), frozenset())

    def can_transition(self, current: str, requested: str) -> bool:
        # Self transitions are only legal when listed explicitly.
        return str(requested) in self.allowed_from(current)

    def validate(self, current: str, requested: str) -> None:
        if not self.can_transition(current, requested):
            raise InvalidTransition(str(current), str(requested))

    def transition(
        self,
        current: str,
        requested: str,
        *,
        notes: str | None = None,
        location: str | None = None,
        user_id: str | None = None,
        timestamp: datetime | str | None = None,
    ) -> dict:
        """Validate ``current -> requested`` and return the timeline entry to append."""
        self.validate(current, requested)
        return build_event(
            requested,
            notes=notes,
            location=location,
            user_id=user_id,
            timestamp=timestamp,
        )

    def __iter__(self):
        for src, dsts in self._edges.items():
            for dst in dsts:
                yield src, dst

    def __repr__(self):
        return f"<TransitionTable {self.name}>"


def build_event(
    status: str,
    *,
    notes: str | None = None,
    location: str | None = None,
    user_id: str | None = None,
    timestamp: datetime | str | None = None,
) -> dict:
    """Return a JSON-serialisable timeline entry."""
    if timestamp is None:
        timestamp = timezone.now()
    if isinstance(timestamp, datetime):
        timestamp = timestamp.isoformat()

    event = {"status": str(status), "timestamp": timestamp}
    if notes is not None:
        event["notes"] = notes
    if location is not None:
        event["location"] = location
    if user_id is not None:
        event["user_id"] = str(user_id)
    return event
