"""Infrastructure adapters for the ideas bounded context."""

from provisio.domain.ideas.infrastructure.idea_repository import (
    IdeaNotFoundError,
    InMemoryIdeaRepository,
)

__all__ = ["IdeaNotFoundError", "InMemoryIdeaRepository"]
