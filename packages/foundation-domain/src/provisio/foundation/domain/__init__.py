"""Provisio Foundation Domain -- pure Python domain primitives.

This package provides the building blocks for optimistic, event-sourced
aggregates: events, exceptions, change tracking, the reconciling
aggregate base class and port interfaces.
"""

from provisio.foundation.domain.aggregates import BaseAggregate
from provisio.foundation.domain.events import BaseEvent, RejectionEvent
from provisio.foundation.domain.exceptions import (
    ConflictError,
    DomainError,
    InvalidCommandPreconditionError,
    InvalidStateTransitionError,
    NotFoundError,
    ResourceLimitExceededError,
    UnknownCorrelationError,
    UnknownEventKindError,
    ValidationError,
)
from provisio.foundation.domain.ports import (
    AggregateRepositoryPort,
    CorrelationIdProviderPort,
    EventTransportPort,
)
from provisio.foundation.domain.tracking import (
    SnapshotTracker,
    TrackingStatus,
    UncommittedEvents,
)

__all__ = [
    "AggregateRepositoryPort",
    "BaseAggregate",
    "BaseEvent",
    "ConflictError",
    "CorrelationIdProviderPort",
    "DomainError",
    "EventTransportPort",
    "InvalidCommandPreconditionError",
    "InvalidStateTransitionError",
    "NotFoundError",
    "RejectionEvent",
    "ResourceLimitExceededError",
    "SnapshotTracker",
    "TrackingStatus",
    "UncommittedEvents",
    "UnknownCorrelationError",
    "UnknownEventKindError",
    "ValidationError",
]
