"""Base event classes for optimistic, event-sourced aggregates.

This module provides the foundational event classes that all domain events
inherit from. It extends the eventsourcing library's DomainEvent with the
correlation metadata used to match locally authored events against the
confirmations and rejections sent back by the authority.

Example:
    Define a domain event by subclassing BaseEvent::

        from dataclasses import dataclass
        from provisio.foundation.domain.events import BaseEvent

        @dataclass(frozen=True, kw_only=True)
        class NoteAdded(BaseEvent):
            text: str

        NoteAdded.get_topic()
        # Returns: "myapp.domain.events:NoteAdded"

Local versus authoritative events:
    Events the aggregate authors itself carry a ``correlation_id`` supplied
    by a ``CorrelationIdProviderPort``. The authority echoes that id back on
    the confirming event, or sends a ``RejectionEvent`` naming it. Events
    authored by other actors usually have no correlation id at all.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from eventsourcing.domain import DomainEvent


@dataclass(frozen=True, kw_only=True)
class BaseEvent(DomainEvent):
    """Base class for all domain events.

    Extends eventsourcing.domain.DomainEvent with reconciliation and
    audit metadata.

    Attributes:
        correlation_id: Token linking a locally authored event to its
            eventual confirmation or rejection. ``None`` for events
            authored elsewhere.
        causation_id: Parent event ID that triggered this event.
        user_id: Acting user identifier for audit trail.

    Inherited from DomainEvent (eventsourcing library):
        originator_id: Aggregate ID (UUID) that emitted this event.
        originator_version: Aggregate version at which the event applies.
        timestamp: Event occurrence time (datetime with timezone, UTC).

    Note:
        Events are immutable (frozen dataclass). Attempting to modify any
        field after instantiation will raise a FrozenInstanceError.
    """

    correlation_id: str | None = None
    causation_id: str | None = None
    user_id: str | None = None

    def __post_init__(self) -> None:
        """Validate fields after dataclass initialization.

        Raises:
            ValueError: If correlation_id is given but blank.
        """
        if self.correlation_id is not None and not self.correlation_id.strip():
            msg = "correlation_id must be a non-empty string when provided"
            raise ValueError(msg)

    @classmethod
    def get_topic(cls) -> str:
        """Get fully-qualified topic for event routing.

        Returns:
            Fully-qualified topic string in format "module:class".
        """
        return f"{cls.__module__}:{cls.__qualname__}"

    @classmethod
    def kind(cls) -> str:
        """Short event kind name, e.g. ``"Idea.TagAdded"``."""
        return cls.__qualname__

    def to_dict(self) -> dict[str, Any]:
        """Serialize event to a JSON-friendly dictionary.

        Includes every dataclass field, base and subclass alike, plus the
        event ``kind``. UUIDs become strings, datetimes ISO 8601 strings,
        enums their values and sets/frozensets sorted lists.

        Example:
            ::

                event.to_dict()
                # {
                #     "kind": "Idea.TagAdded",
                #     "originator_id": "550e8400-...",
                #     "originator_version": 3,
                #     "timestamp": "2026-01-24T10:30:00+00:00",
                #     "correlation_id": "c-123",
                #     "causation_id": None,
                #     "user_id": None,
                #     "tag_id": 7,
                # }
        """
        data: dict[str, Any] = {"kind": self.kind()}
        for field in dataclasses.fields(self):
            data[field.name] = _to_primitive(getattr(self, field.name))
        return data


@dataclass(frozen=True, kw_only=True)
class RejectionEvent(BaseEvent):
    """Authoritative notice that a locally authored event was refused.

    The ``correlation_id`` is required and names the rejected event.
    Rejections are never applied to state; the reconciler rolls the
    aggregate back and replays what remains instead.
    """

    reason: str = ""

    def __post_init__(self) -> None:
        if self.correlation_id is None:
            msg = "Rejection events require the correlation_id of the rejected event"
            raise ValueError(msg)
        super().__post_init__()


def _to_primitive(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return value
