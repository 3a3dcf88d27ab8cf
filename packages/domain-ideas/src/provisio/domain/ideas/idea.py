"""Idea aggregate: optimistic edits reconciled against the authority.

An Idea is edited locally and shows every change at once. Each local change
is published to the authority under a correlation id; the authority's
answer arrives later as a batch of events that confirms, rejects or simply
adds to the local changes. See ``BaseAggregate.reconcile`` for the batch
state machine.

Events::

    Idea.Created        bootstrap; first event of every idea
    Idea.FieldChanged   overwrite ``title`` or ``description``
    Idea.TagAdded       add a tag (idempotent)
    Idea.Rejected       authority refused a local event
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from eventsourcing.dispatch import singledispatchmethod

from provisio.domain.ideas.idea_value_objects import IdeaField, IdeaTitle, TagId
from provisio.foundation.domain.aggregates import BaseAggregate
from provisio.foundation.domain.events import BaseEvent, RejectionEvent
from provisio.foundation.domain.exceptions import UnknownEventKindError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from provisio.foundation.domain.ports.correlation_ids import CorrelationIdProviderPort


class Idea(BaseAggregate):
    """Event-sourced Idea with optimistic local edits.

    Attributes:
        id: Immutable identifier set by ``Idea.Created``.
        title: Current title.
        description: Current description.
        tags: Set of tag identifiers.
        version: Number of events applied to the current state.

    Example:
        >>> idea = Idea.create(idea_id=uuid4(), title="1st idea")
        >>> idea.change_title("Awesome idea", correlation_id="c-1")
        'c-1'
        >>> idea.title
        'Awesome idea'
        >>> len(idea.uncommitted_events)
        1
    """

    @dataclass(frozen=True, kw_only=True)
    class Created(BaseEvent):
        title: str
        description: str = ""
        tags: frozenset[TagId] = frozenset()

    @dataclass(frozen=True, kw_only=True)
    class FieldChanged(BaseEvent):
        field: IdeaField
        value: str

        def __post_init__(self) -> None:
            super().__post_init__()
            object.__setattr__(self, "field", IdeaField(self.field))

    @dataclass(frozen=True, kw_only=True)
    class TagAdded(BaseEvent):
        tag_id: TagId

    @dataclass(frozen=True, kw_only=True)
    class Rejected(RejectionEvent):
        """The authority refused the local event named by ``correlation_id``."""

    creation_event = Created
    state_fields = ("title", "description", "tags")

    def __init__(self, *, correlation_ids: CorrelationIdProviderPort | None = None) -> None:
        super().__init__(correlation_ids=correlation_ids)
        self.title = ""
        self.description = ""
        self.tags: set[TagId] = set()

    # -- Creation ----------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        idea_id: UUID | None = None,
        title: str,
        description: str = "",
        tags: Iterable[TagId] = (),
        correlation_ids: CorrelationIdProviderPort | None = None,
    ) -> Idea:
        """Create an Idea by applying a synthesized ``Idea.Created`` event.

        The creation event is bootstrap state: it is neither queued for
        confirmation nor logged for rollback.

        Args:
            idea_id: Identifier for the new idea; generated when omitted.
            title: Initial title (1-255 chars, stripped).
            description: Initial description.
            tags: Initial tag identifiers.
            correlation_ids: Provider for the correlation ids of later commands.

        Raises:
            ValidationError: If the title is invalid.
        """
        idea = cls(correlation_ids=correlation_ids)
        idea.apply(
            cls.Created(
                originator_id=idea_id or uuid4(),
                originator_version=1,
                timestamp=datetime.now(UTC),
                title=IdeaTitle(title).value,
                description=description,
                tags=frozenset(tags),
            )
        )
        return idea

    # -- Public commands ---------------------------------------------------

    def change_field(
        self,
        name: str,
        value: str,
        *,
        correlation_id: str | None = None,
    ) -> str:
        """Overwrite a text field locally and queue the change.

        Titles go through ``IdeaTitle`` here (stripped, 1-255 chars). Remote
        ``FieldChanged`` events are applied as the authority sent them and
        are not re-validated, so a title accepted elsewhere is kept verbatim.

        Args:
            name: Field to change ("title" or "description").
            value: New value.
            correlation_id: Explicit correlation id; drawn from the
                provider when omitted.

        Returns:
            The correlation id the authority will answer with.

        Raises:
            ValidationError: If the field is unknown, the title invalid or
                no correlation id is available.
            InvalidCommandPreconditionError: If the idea has not been created.
        """
        field = IdeaField.parse(name)
        if field is IdeaField.TITLE:
            value = IdeaTitle(value).value
        correlation_id = self._begin_local_change("change_field", correlation_id)
        self._trigger(
            self._new_event(
                Idea.FieldChanged,
                correlation_id=correlation_id,
                field=field,
                value=value,
            )
        )
        return correlation_id

    def change_title(self, title: str, *, correlation_id: str | None = None) -> str:
        """Change the title. See ``change_field``."""
        return self.change_field(IdeaField.TITLE, title, correlation_id=correlation_id)

    def change_description(self, description: str, *, correlation_id: str | None = None) -> str:
        """Change the description. See ``change_field``."""
        return self.change_field(
            IdeaField.DESCRIPTION, description, correlation_id=correlation_id
        )

    def add_tag(self, tag_id: TagId, *, correlation_id: str | None = None) -> str:
        """Add a tag locally and queue the change.

        Adding a tag that is already present still records an event; the
        tag set keeps a single copy.

        Returns:
            The correlation id the authority will answer with.

        Raises:
            InvalidCommandPreconditionError: If the idea has not been created.
            ValidationError: If no correlation id is available.
        """
        correlation_id = self._begin_local_change("add_tag", correlation_id)
        self._trigger(self._new_event(Idea.TagAdded, correlation_id=correlation_id, tag_id=tag_id))
        return correlation_id

    # -- Serialization -----------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Materialized state as a JSON-friendly dictionary."""
        return {
            "idea_id": str(self.id) if self.id is not None else None,
            "title": self.title,
            "description": self.description,
            "tags": sorted(self.tags, key=str),
            "version": self.version,
        }

    # -- Event handlers ----------------------------------------------------

    @singledispatchmethod
    def mutate(self, domain_event: BaseEvent) -> None:
        raise UnknownEventKindError(domain_event.kind(), aggregate_id=str(self.id))

    @mutate.register(Created)
    def _(self, domain_event: Idea.Created) -> None:
        self.title = domain_event.title
        self.description = domain_event.description
        self.tags = set(domain_event.tags)

    @mutate.register(FieldChanged)
    def _(self, domain_event: Idea.FieldChanged) -> None:
        setattr(self, IdeaField(domain_event.field).value, domain_event.value)

    @mutate.register(TagAdded)
    def _(self, domain_event: Idea.TagAdded) -> None:
        self.tags.add(domain_event.tag_id)
