"""Tests for UncommittedEvents and SnapshotTracker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from provisio.foundation.domain.events import BaseEvent, RejectionEvent
from provisio.foundation.domain.exceptions import (
    ConflictError,
    UnknownCorrelationError,
    ValidationError,
)
from provisio.foundation.domain.tracking import (
    SnapshotTracker,
    TrackingStatus,
    UncommittedEvents,
)

_ORIGINATOR = uuid4()


@dataclass(frozen=True, kw_only=True)
class NoteAdded(BaseEvent):
    text: str = ""


def _event(correlation_id: str | None = None, originator_id: UUID = _ORIGINATOR) -> NoteAdded:
    return NoteAdded(
        originator_id=originator_id,
        originator_version=1,
        timestamp=datetime.now(UTC),
        correlation_id=correlation_id,
    )


def _rejection(correlation_id: str) -> RejectionEvent:
    return RejectionEvent(
        originator_id=_ORIGINATOR,
        originator_version=1,
        timestamp=datetime.now(UTC),
        correlation_id=correlation_id,
    )


@pytest.mark.unit
class TestUncommittedEvents:
    def test_enqueue_preserves_order(self) -> None:
        queue = UncommittedEvents()
        first, second = _event("c-1"), _event("c-2")
        queue.enqueue(first)
        queue.enqueue(second)
        assert list(queue) == [first, second]
        assert len(queue) == 2

    def test_enqueue_requires_correlation_id(self) -> None:
        with pytest.raises(ValidationError, match="correlation id"):
            UncommittedEvents().enqueue(_event())

    def test_enqueue_rejects_duplicate_correlation_id(self) -> None:
        queue = UncommittedEvents()
        queue.enqueue(_event("c-1"))
        with pytest.raises(ConflictError):
            queue.enqueue(_event("c-1"))

    def test_confirm_removes_match(self) -> None:
        queue = UncommittedEvents()
        local = _event("c-1")
        queue.enqueue(local)
        assert queue.confirm("c-1") is local
        assert len(queue) == 0

    def test_confirm_without_match_is_noop(self) -> None:
        queue = UncommittedEvents()
        queue.enqueue(_event("c-1"))
        assert queue.confirm("other") is None
        assert queue.confirm(None) is None
        assert len(queue) == 1

    def test_confirm_all_skips_rejections_and_keeps_order(self) -> None:
        queue = UncommittedEvents()
        for cid in ("c-1", "c-2", "c-3", "c-4"):
            queue.enqueue(_event(cid))

        confirmed = queue.confirm_all([_event("c-3"), _rejection("c-2"), _event(), _event("c-1")])

        assert [e.correlation_id for e in confirmed] == ["c-3", "c-1"]
        assert [e.correlation_id for e in queue] == ["c-2", "c-4"]

    def test_remove_unknown_raises(self) -> None:
        with pytest.raises(UnknownCorrelationError):
            UncommittedEvents().remove("missing")

    def test_remove_and_discard(self) -> None:
        queue = UncommittedEvents()
        queue.enqueue(_event("c-1"))
        queue.enqueue(_event("c-2"))
        assert queue.remove("c-1").correlation_id == "c-1"
        queue.discard("c-2")
        queue.discard("c-2")
        assert len(queue) == 0
        assert "c-2" not in queue


@pytest.mark.unit
class TestSnapshotTracker:
    def test_starts_confirmed(self) -> None:
        tracker = SnapshotTracker()
        assert tracker.status is TrackingStatus.CONFIRMED
        assert tracker.snapshot is None
        assert tracker.events == ()

    def test_record_without_snapshot_is_noop(self) -> None:
        tracker = SnapshotTracker()
        tracker.record(_event())
        assert tracker.events == ()

    def test_ensure_takes_snapshot_once(self) -> None:
        tracker = SnapshotTracker()
        assert tracker.ensure({"title": "a"}) is True
        tracker.record(_event("c-1"))
        assert tracker.ensure({"title": "b"}) is False
        assert tracker.snapshot == {"title": "a"}
        assert len(tracker.events) == 1
        assert tracker.status is TrackingStatus.PENDING

    def test_snapshot_is_a_deep_copy(self) -> None:
        tracker = SnapshotTracker()
        tags = {1, 2}
        tracker.ensure({"tags": tags})
        tags.add(3)
        assert tracker.snapshot is not None
        assert tracker.snapshot["tags"] == {1, 2}

    def test_restore_returns_independent_copies(self) -> None:
        tracker = SnapshotTracker()
        tracker.ensure({"tags": {1}})
        restored = tracker.restore()
        restored["tags"].add(99)
        assert tracker.restore() == {"tags": {1}}

    def test_restore_without_snapshot_raises(self) -> None:
        with pytest.raises(ValueError, match="no snapshot"):
            SnapshotTracker().restore()

    def test_snapshot_view_is_read_only(self) -> None:
        tracker = SnapshotTracker()
        tracker.ensure({"title": "a"})
        assert tracker.snapshot is not None
        with pytest.raises(TypeError):
            tracker.snapshot["title"] = "b"  # type: ignore[index]

    def test_remove_any_logged_entry(self) -> None:
        tracker = SnapshotTracker()
        tracker.ensure({})
        for cid in ("c-1", None, "c-2"):
            tracker.record(_event(cid))

        removed = tracker.remove("c-1")

        assert removed.correlation_id == "c-1"
        assert [e.correlation_id for e in tracker.events] == [None, "c-2"]

    def test_remove_unknown_raises(self) -> None:
        tracker = SnapshotTracker()
        tracker.ensure({})
        with pytest.raises(UnknownCorrelationError):
            tracker.remove("missing")

    def test_discard_clears_snapshot_and_log(self) -> None:
        tracker = SnapshotTracker()
        tracker.ensure({"title": "a"})
        tracker.record(_event("c-1"))
        tracker.discard()
        assert tracker.status is TrackingStatus.CONFIRMED
        assert tracker.snapshot is None
        assert tracker.events == ()
