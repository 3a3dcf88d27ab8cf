"""Application service for editing and reconciling Idea aggregates.

Wires the Idea aggregate to its collaborators: a repository of live ideas,
a correlation id provider, and optionally an outbound transport. Enforces
the single-writer rule by serializing every call into an idea behind a
per-idea lock.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import TYPE_CHECKING

from provisio.domain.ideas.idea import Idea
from provisio.domain.ideas.settings import IdeaSettings, get_idea_settings
from provisio.foundation.domain.exceptions import ConflictError, ResourceLimitExceededError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from uuid import UUID

    from provisio.domain.ideas.idea_value_objects import TagId
    from provisio.foundation.domain.events import BaseEvent
    from provisio.foundation.domain.ports.correlation_ids import CorrelationIdProviderPort
    from provisio.foundation.domain.ports.event_transport import EventTransportPort
    from provisio.foundation.domain.ports.repository import AggregateRepositoryPort

logger = logging.getLogger(__name__)


class IdeaApplication:
    """Runs Idea commands and authoritative batches under per-idea locks.

    Local commands apply immediately and, when a transport is configured,
    publish the new event for the authority to confirm or reject. Batches
    from the authority are routed to their ideas by ``originator_id``.

    Args:
        repository: Keyed container of live ideas.
        correlation_ids: Provider stamped onto every created idea.
        transport: Optional outbound transport for locally authored events.
        settings: Optional settings; loaded from the environment if omitted.
    """

    def __init__(
        self,
        repository: AggregateRepositoryPort[Idea],
        correlation_ids: CorrelationIdProviderPort,
        transport: EventTransportPort | None = None,
        settings: IdeaSettings | None = None,
    ) -> None:
        self._repository = repository
        self._correlation_ids = correlation_ids
        self._transport = transport
        self._settings = settings or get_idea_settings()
        self._locks: defaultdict[UUID, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    # -- Commands ----------------------------------------------------------

    def create_idea(
        self,
        *,
        title: str,
        description: str = "",
        tags: Iterable[TagId] = (),
        idea_id: UUID | None = None,
    ) -> Idea:
        """Create an idea and register it in the repository.

        Raises:
            ValidationError: If the title is invalid.
            ConflictError: If ``idea_id`` is already registered.
        """
        idea = Idea.create(
            idea_id=idea_id,
            title=title,
            description=description,
            tags=tags,
            correlation_ids=self._correlation_ids,
        )
        self._repository.add(idea)
        logger.info("idea_created", extra={"idea_id": str(idea.id), "title": idea.title})
        return idea

    def change_title(self, idea_id: UUID, title: str) -> str:
        """Change an idea's title; returns the correlation id."""
        return self._run_command(idea_id, "change_title", lambda idea: idea.change_title(title))

    def change_description(self, idea_id: UUID, description: str) -> str:
        """Change an idea's description; returns the correlation id."""
        return self._run_command(
            idea_id, "change_description", lambda idea: idea.change_description(description)
        )

    def add_tag(self, idea_id: UUID, tag_id: TagId) -> str:
        """Add a tag to an idea; returns the correlation id."""
        return self._run_command(idea_id, "add_tag", lambda idea: idea.add_tag(tag_id))

    def pending_events(self, idea_id: UUID) -> tuple[BaseEvent, ...]:
        """Locally authored events of an idea still awaiting the authority."""
        with self._exclusive(idea_id):
            return self._repository.get(idea_id).uncommitted_events

    # -- Authoritative batches ---------------------------------------------

    def receive(self, batch: Sequence[BaseEvent]) -> None:
        """Reconcile a batch of authoritative events.

        Entries are grouped by ``originator_id``; each idea reconciles its
        entries in their original relative order. All ideas are looked up
        before any of them is touched.

        Raises:
            ResourceLimitExceededError: If the batch is larger than
                ``max_batch_size``. Nothing is applied.
            IdeaNotFoundError: If an entry targets an unknown idea. Nothing
                is applied.
            UnknownEventKindError: Propagated from the failing idea; ideas
                reconciled before it keep their changes.
        """
        if len(batch) > self._settings.max_batch_size:
            raise ResourceLimitExceededError(
                "batch_events",
                limit=self._settings.max_batch_size,
                current=len(batch),
            )

        grouped: dict[UUID, list[BaseEvent]] = {}
        for domain_event in batch:
            grouped.setdefault(domain_event.originator_id, []).append(domain_event)
        ideas = {idea_id: self._repository.get(idea_id) for idea_id in grouped}

        for idea_id, idea_events in grouped.items():
            with self._exclusive(idea_id):
                ideas[idea_id].reconcile(idea_events)
            logger.info(
                "idea_batch_reconciled",
                extra={
                    "idea_id": str(idea_id),
                    "events": len(idea_events),
                    "pending": len(ideas[idea_id].uncommitted_events),
                    "tracking_status": ideas[idea_id].tracking_status.value,
                },
            )

    # -- Internals ---------------------------------------------------------

    def _run_command(self, idea_id: UUID, command: str, action: Callable[[Idea], str]) -> str:
        with self._exclusive(idea_id):
            idea = self._repository.get(idea_id)
            correlation_id = action(idea)
            new_event = idea.pending_event(correlation_id)
        if self._transport is not None and new_event is not None:
            self._transport.publish([new_event])
        logger.info(
            "idea_command_applied",
            extra={
                "idea_id": str(idea_id),
                "command": command,
                "correlation_id": correlation_id,
            },
        )
        return correlation_id

    @contextmanager
    def _exclusive(self, idea_id: UUID) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks[idea_id]
        if not lock.acquire(timeout=self._settings.lock_timeout_seconds):
            raise ConflictError(
                "Idea is locked by another writer",
                idea_id=str(idea_id),
                timeout_seconds=self._settings.lock_timeout_seconds,
            )
        try:
            yield
        finally:
            lock.release()
