"""Base aggregate class for optimistic, event-sourced domain objects.

This module provides the aggregate infrastructure that applies local
changes immediately and reconciles them later against batches of
authoritative events. BaseAggregate combines:

- an event applier (handlers registered per event class with the
  eventsourcing library's ``singledispatchmethod``),
- an ``UncommittedEvents`` queue of locally authored events,
- a ``SnapshotTracker`` used as rollback point when the authority rejects
  one of those events,
- ``reconcile()``, the batch state machine tying them together.

Example:
    >>> from dataclasses import dataclass
    >>> from eventsourcing.dispatch import singledispatchmethod
    >>>
    >>> class Dog(BaseAggregate):
    ...     @dataclass(frozen=True, kw_only=True)
    ...     class Registered(BaseEvent):
    ...         name: str
    ...
    ...     @dataclass(frozen=True, kw_only=True)
    ...     class TrickAdded(BaseEvent):
    ...         trick: str
    ...
    ...     creation_event = Registered
    ...     state_fields = ("name", "tricks")
    ...
    ...     @singledispatchmethod
    ...     def mutate(self, domain_event):
    ...         raise UnknownEventKindError(domain_event.kind())
    ...
    ...     @mutate.register(Registered)
    ...     def _(self, domain_event):
    ...         self.name = domain_event.name
    ...         self.tricks = []
    ...
    ...     @mutate.register(TrickAdded)
    ...     def _(self, domain_event):
    ...         self.tricks.append(domain_event.trick)
"""

from __future__ import annotations

import inspect
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Self, TypeVar

from eventsourcing.dispatch import singledispatchmethod

from provisio.foundation.domain.events import BaseEvent, RejectionEvent
from provisio.foundation.domain.exceptions import (
    ConflictError,
    InvalidCommandPreconditionError,
    UnknownCorrelationError,
    UnknownEventKindError,
    ValidationError,
)
from provisio.foundation.domain.tracking import (
    SnapshotTracker,
    TrackingStatus,
    UncommittedEvents,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from uuid import UUID

    from provisio.foundation.domain.ports.correlation_ids import CorrelationIdProviderPort

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=BaseEvent)


class BaseAggregate:
    """Base class for aggregates reconciled against a remote authority.

    Subclasses must:
        1. Define their events as BaseEvent dataclasses (nested classes by
           convention) and point ``creation_event`` at the creation event.
        2. List the snapshotted attributes in ``state_fields``.
        3. Declare their own ``mutate`` with ``@singledispatchmethod`` and
           register one pure handler per event class. Handlers only change
           attributes listed in ``state_fields``.
        4. Implement public commands that call ``_begin_local_change()``,
           build the event with ``_new_event()`` and pass it to
           ``_trigger()``.

    Attributes:
        version: Number of events applied to the current state.

    Single-writer: an instance is not safe for concurrent use. Callers
    serialize every command and ``reconcile()`` call per instance.
    """

    creation_event: ClassVar[type[BaseEvent]]
    state_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *, correlation_ids: CorrelationIdProviderPort | None = None) -> None:
        """Create an empty aggregate awaiting its creation event.

        Args:
            correlation_ids: Provider of correlation ids for local commands.
                When omitted, every command needs an explicit correlation_id.
        """
        self._id: UUID | None = None
        self.version = 0
        self._correlation_ids = correlation_ids
        self._uncommitted = UncommittedEvents()
        self._tracker = SnapshotTracker()

    @classmethod
    def reconstruct(
        cls,
        history: Iterable[BaseEvent],
        *,
        correlation_ids: CorrelationIdProviderPort | None = None,
    ) -> Self:
        """Rebuild a fully confirmed aggregate from authoritative history.

        Raises:
            ValidationError: If the history is empty.
            InvalidCommandPreconditionError: If the history does not start
                with the creation event.
        """
        aggregate = cls(correlation_ids=correlation_ids)
        for domain_event in history:
            aggregate.apply(domain_event)
        if not aggregate.is_created:
            raise ValidationError("history", "History must start with the creation event")
        return aggregate

    # -- Read-only views ---------------------------------------------------

    @property
    def id(self) -> UUID | None:
        """Identifier assigned by the creation event; immutable afterwards."""
        return self._id

    @property
    def is_created(self) -> bool:
        return self._id is not None

    @property
    def uncommitted_events(self) -> tuple[BaseEvent, ...]:
        """Locally authored events still awaiting confirmation or rejection."""
        return tuple(self._uncommitted)

    def pending_event(self, correlation_id: str) -> BaseEvent | None:
        """The uncommitted event stamped with ``correlation_id``, if any."""
        return self._uncommitted.get(correlation_id)

    @property
    def snapshot(self) -> Mapping[str, Any] | None:
        return self._tracker.snapshot

    @property
    def events_since_snapshot(self) -> tuple[BaseEvent, ...]:
        return self._tracker.events

    @property
    def tracking_status(self) -> TrackingStatus:
        return self._tracker.status

    # -- Event applier -----------------------------------------------------

    @singledispatchmethod
    def mutate(self, domain_event: BaseEvent) -> None:
        """Pure state transition for ``domain_event``; overridden per aggregate."""
        raise UnknownEventKindError(domain_event.kind(), aggregate_id=str(self._id))

    def apply(self, domain_event: BaseEvent) -> None:
        """Apply an authoritative event and log it while a snapshot exists.

        Raises:
            UnknownEventKindError: If no handler is registered. State is
                left untouched.
            InvalidCommandPreconditionError: If the event is out of place
                in the aggregate lifecycle.
        """
        handler = self._handler_for(domain_event)
        self._invoke(handler, domain_event)
        self._tracker.record(domain_event)

    def _handler_for(self, domain_event: BaseEvent) -> Callable[[Any, BaseEvent], None]:
        # Resolve without invoking so that failures happen before mutation.
        dispatcher = inspect.getattr_static(self, "mutate").dispatcher
        handler = dispatcher.dispatch(type(domain_event))
        if handler is dispatcher.dispatch(object):
            raise UnknownEventKindError(domain_event.kind(), aggregate_id=str(self._id))

        is_creation = isinstance(domain_event, self.creation_event)
        if self._id is None and not is_creation:
            raise InvalidCommandPreconditionError(
                f"Cannot apply {domain_event.kind()}: "
                f"{type(self).__name__} has not been created",
                event_kind=domain_event.kind(),
            )
        if self._id is not None and is_creation:
            raise InvalidCommandPreconditionError(
                f"Cannot apply {domain_event.kind()}: "
                f"{type(self).__name__} {self._id} already exists",
                event_kind=domain_event.kind(),
            )
        return handler

    def _invoke(self, handler: Callable[[Any, BaseEvent], None], domain_event: BaseEvent) -> None:
        if isinstance(domain_event, self.creation_event):
            self._id = domain_event.originator_id
        handler(self, domain_event)
        self.version += 1

    # -- Local commands ----------------------------------------------------

    def _begin_local_change(self, command: str, correlation_id: str | None) -> str:
        """Check preconditions, pick a correlation id and ensure a snapshot.

        Args:
            command: Name of the command, for error context.
            correlation_id: Explicit id, or None to draw one from the provider.

        Returns:
            The correlation id to stamp on the new event.

        Raises:
            InvalidCommandPreconditionError: If the aggregate is not created.
            ValidationError: If no correlation id is available.
            ConflictError: If the correlation id is already pending.
        """
        if self._id is None:
            raise InvalidCommandPreconditionError(
                f"Cannot {command}: {type(self).__name__} has not been created",
                command=command,
            )
        if correlation_id is None and self._correlation_ids is not None:
            correlation_id = self._correlation_ids.next_correlation_id()
        if not correlation_id or not correlation_id.strip():
            raise ValidationError(
                "correlation_id",
                "A non-blank correlation id must be supplied or a provider configured",
                command=command,
            )
        if correlation_id in self._uncommitted:
            raise ConflictError("Duplicate correlation id", correlation_id=correlation_id)

        self._tracker.ensure(self._capture_state())
        return correlation_id

    def _new_event(self, event_class: type[_E], **payload: Any) -> _E:
        return event_class(
            originator_id=self._id,
            originator_version=self.version + 1,
            timestamp=datetime.now(UTC),
            **payload,
        )

    def _trigger(self, domain_event: BaseEvent) -> None:
        """Apply a locally authored event and queue it for confirmation."""
        handler = self._handler_for(domain_event)
        self._uncommitted.enqueue(domain_event)
        self._invoke(handler, domain_event)
        self._tracker.record(domain_event)

    # -- Reconciliation ----------------------------------------------------

    def reconcile(self, batch: Iterable[BaseEvent]) -> None:
        """Merge a batch of authoritative events into local state.

        Entries are processed strictly in batch order:

        - a ``RejectionEvent`` drops the named event from the snapshot log,
          restores the snapshot and replays the remaining log;
        - any other event first confirms the pending local event with the
          same correlation id (if any), then is applied and logged.

        When the queue of uncommitted events is empty after the batch, the
        snapshot is discarded and the aggregate is fully confirmed.

        An error aborts the rest of the batch; entries processed before it
        stay applied.

        Raises:
            UnknownEventKindError: If an entry has no registered handler.
            InvalidCommandPreconditionError: If an entry is out of place in
                the aggregate lifecycle.
        """
        applied = confirmed = rejected = skipped = 0
        for domain_event in batch:
            if isinstance(domain_event, RejectionEvent):
                if self._reject(domain_event):
                    rejected += 1
                else:
                    skipped += 1
                continue

            handler = self._handler_for(domain_event)
            if self._uncommitted.confirm(domain_event.correlation_id) is not None:
                confirmed += 1
            self._invoke(handler, domain_event)
            self._tracker.record(domain_event)
            applied += 1

        if not self._uncommitted and self._tracker.status is TrackingStatus.PENDING:
            self._tracker.discard()

        logger.debug(
            "batch_reconciled",
            extra={
                "aggregate_id": str(self._id),
                "applied": applied,
                "confirmed": confirmed,
                "rejected": rejected,
                "skipped": skipped,
                "pending": len(self._uncommitted),
                "tracking_status": self._tracker.status.value,
            },
        )

    def _reject(self, rejection: RejectionEvent) -> bool:
        correlation_id = rejection.correlation_id
        assert correlation_id is not None
        try:
            self._tracker.remove(correlation_id)
        except UnknownCorrelationError:
            logger.warning(
                "rejection_skipped",
                extra={
                    "aggregate_id": str(self._id),
                    "correlation_id": correlation_id,
                    "reason": rejection.reason,
                },
            )
            return False

        self._restore_state(self._tracker.restore())
        for logged_event in self._tracker.events:
            self._invoke(self._handler_for(logged_event), logged_event)
        self._uncommitted.discard(correlation_id)

        logger.info(
            "local_event_rolled_back",
            extra={
                "aggregate_id": str(self._id),
                "correlation_id": correlation_id,
                "replayed": len(self._tracker.events),
                "reason": rejection.reason,
            },
        )
        return True

    # -- State capture -----------------------------------------------------

    def _capture_state(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in ("version", *self.state_fields)}

    def _restore_state(self, state: Mapping[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self._id!s}, version={self.version}, "
            f"status={self._tracker.status.value}, pending={len(self._uncommitted)})"
        )
