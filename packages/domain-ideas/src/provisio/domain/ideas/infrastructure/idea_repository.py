"""In-memory repository of live Idea aggregates.

A plain keyed container. Persistence and history loading belong to the
event store behind the transport; this repository only keeps the
aggregates a process is currently editing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from provisio.foundation.domain.exceptions import ConflictError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from provisio.domain.ideas.idea import Idea

logger = logging.getLogger(__name__)


class IdeaNotFoundError(NotFoundError):
    """Raised when an idea cannot be found by ID."""

    def __init__(self, idea_id: UUID | str) -> None:
        super().__init__("Idea", idea_id)


class InMemoryIdeaRepository:
    """Keyed container of Idea aggregates.

    Implements ``AggregateRepositoryPort[Idea]``.

    Args:
        ideas: Optional ideas to register up front.
    """

    def __init__(self, ideas: Iterable[Idea] = ()) -> None:
        self._ideas: dict[UUID, Idea] = {}
        for idea in ideas:
            self.add(idea)

    def add(self, idea: Idea) -> None:
        """Register a created idea.

        Raises:
            ValueError: If the idea has not been created yet.
            ConflictError: If an idea with the same ID is registered.
        """
        if idea.id is None:
            msg = "Only created ideas can be registered"
            raise ValueError(msg)
        if idea.id in self._ideas:
            raise ConflictError("Idea already registered", idea_id=str(idea.id))
        self._ideas[idea.id] = idea
        logger.debug("idea_registered", extra={"idea_id": str(idea.id)})

    def get(self, idea_id: UUID) -> Idea:
        """Return the idea with ``idea_id``.

        Raises:
            IdeaNotFoundError: If no such idea is registered.
        """
        try:
            return self._ideas[idea_id]
        except KeyError:
            raise IdeaNotFoundError(idea_id) from None

    def ids(self) -> list[UUID]:
        return list(self._ideas)

    def __contains__(self, idea_id: object) -> bool:
        return idea_id in self._ideas

    def __len__(self) -> int:
        return len(self._ideas)
