"""Change tracking for optimistic aggregates.

Two collaborating structures keep an aggregate responsive while its
locally authored events wait for the authority:

- ``UncommittedEvents``: locally authored events not yet confirmed or
  rejected, keyed by correlation id.
- ``SnapshotTracker``: at most one snapshot of aggregate state, taken
  lazily on the first local mutation, plus the ordered log of every event
  applied since. It is the rollback point when a pending event is rejected.

Tracker state machine::

              ensure()                 discard()
    CONFIRMED ---------> PENDING ------------------> CONFIRMED
                          |   ^
                remove()  |   |  (rollback + replay)
                          +---+
"""

from __future__ import annotations

import copy
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from provisio.foundation.domain.events import RejectionEvent
from provisio.foundation.domain.exceptions import (
    ConflictError,
    UnknownCorrelationError,
    ValidationError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from provisio.foundation.domain.events import BaseEvent


class TrackingStatus(StrEnum):
    """Reconciliation states of an aggregate.

    CONFIRMED: no snapshot, no log; every applied event is authoritative.
    PENDING: snapshot and log active; local events await the authority.
    """

    CONFIRMED = "CONFIRMED"
    PENDING = "PENDING"


class UncommittedEvents:
    """Ordered queue of locally authored events awaiting resolution.

    Entries are keyed by correlation id in an insertion-ordered dict, so
    confirming an entry costs O(1) regardless of queue length. The queue is
    always a subsequence, in original order, of the events ever enqueued.
    """

    def __init__(self) -> None:
        self._events: dict[str, BaseEvent] = {}

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[BaseEvent]:
        return iter(tuple(self._events.values()))

    def __contains__(self, correlation_id: object) -> bool:
        return correlation_id in self._events

    def get(self, correlation_id: str) -> BaseEvent | None:
        return self._events.get(correlation_id)

    def enqueue(self, domain_event: BaseEvent) -> None:
        """Append a locally authored event.

        Raises:
            ValidationError: If the event carries no correlation id.
            ConflictError: If the correlation id is already queued.
        """
        correlation_id = domain_event.correlation_id
        if not correlation_id:
            raise ValidationError(
                "correlation_id",
                "Locally authored events must carry a correlation id",
                event_kind=domain_event.kind(),
            )
        if correlation_id in self._events:
            raise ConflictError("Duplicate correlation id", correlation_id=correlation_id)
        self._events[correlation_id] = domain_event

    def confirm(self, correlation_id: str | None) -> BaseEvent | None:
        """Remove the entry confirmed by an authoritative event, if any.

        Returns:
            The confirmed local event, or None when nothing matched.
        """
        if correlation_id is None:
            return None
        return self._events.pop(correlation_id, None)

    def confirm_all(self, batch: Iterable[BaseEvent]) -> list[BaseEvent]:
        """Remove every entry matched by a non-rejection event of ``batch``.

        ``BaseAggregate.reconcile`` performs the same removal one entry at a
        time through ``confirm``, so that each confirmation happens only
        after the entry's handler has been resolved.

        Returns:
            The confirmed local events, in batch order.
        """
        confirmed: list[BaseEvent] = []
        for domain_event in batch:
            if isinstance(domain_event, RejectionEvent):
                continue
            local_event = self.confirm(domain_event.correlation_id)
            if local_event is not None:
                confirmed.append(local_event)
        return confirmed

    def remove(self, correlation_id: str) -> BaseEvent:
        """Remove a rejected entry.

        Raises:
            UnknownCorrelationError: If no entry has this correlation id.
        """
        try:
            return self._events.pop(correlation_id)
        except KeyError:
            raise UnknownCorrelationError(correlation_id, source="uncommitted_events") from None

    def discard(self, correlation_id: str) -> None:
        """Remove an entry if present."""
        self._events.pop(correlation_id, None)


class SnapshotTracker:
    """Snapshot of aggregate state plus the log of events applied since.

    The snapshot and its log are created together by ``ensure()``, grow
    together while local events are pending, and are destroyed together by
    ``discard()`` once the authority has confirmed everything.

    Attributes:
        status: CONFIRMED when no snapshot exists, PENDING otherwise.
    """

    def __init__(self) -> None:
        self._snapshot: dict[str, Any] | None = None
        self._events: list[BaseEvent] = []

    @property
    def status(self) -> TrackingStatus:
        if self._snapshot is None:
            return TrackingStatus.CONFIRMED
        return TrackingStatus.PENDING

    @property
    def snapshot(self) -> Mapping[str, Any] | None:
        """Read-only view of the snapshotted state, or None."""
        if self._snapshot is None:
            return None
        return MappingProxyType(self._snapshot)

    @property
    def events(self) -> tuple[BaseEvent, ...]:
        """Events applied since the snapshot, in application order."""
        return tuple(self._events)

    def ensure(self, state: Mapping[str, Any]) -> bool:
        """Snapshot ``state`` unless a snapshot already exists.

        Args:
            state: Current aggregate state, deep-copied into the snapshot.

        Returns:
            True if a new snapshot was taken, False if one already existed.
        """
        if self._snapshot is not None:
            return False
        self._snapshot = copy.deepcopy(dict(state))
        self._events = []
        return True

    def record(self, domain_event: BaseEvent) -> None:
        """Log an applied event; no-op while no snapshot exists."""
        if self._snapshot is not None:
            self._events.append(domain_event)

    def remove(self, correlation_id: str) -> BaseEvent:
        """Drop the logged event with ``correlation_id`` from the replay log.

        Raises:
            UnknownCorrelationError: If no logged event carries this id.
        """
        for index, domain_event in enumerate(self._events):
            if domain_event.correlation_id == correlation_id:
                return self._events.pop(index)
        raise UnknownCorrelationError(correlation_id, source="snapshot_log")

    def restore(self) -> dict[str, Any]:
        """Return a deep copy of the snapshotted state to roll back to.

        Raises:
            ValueError: If no snapshot exists.
        """
        if self._snapshot is None:
            msg = "Cannot restore: no snapshot has been taken"
            raise ValueError(msg)
        return copy.deepcopy(self._snapshot)

    def discard(self) -> None:
        """Accept current state as the new baseline; state is not touched."""
        self._snapshot = None
        self._events = []
