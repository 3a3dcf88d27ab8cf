"""Provisio Domain Ideas -- optimistic editing of ideas."""

from provisio.domain.ideas.idea import Idea
from provisio.domain.ideas.idea_app import IdeaApplication
from provisio.domain.ideas.idea_value_objects import IdeaField, IdeaTitle, TagId
from provisio.domain.ideas.infrastructure import IdeaNotFoundError, InMemoryIdeaRepository
from provisio.domain.ideas.settings import IdeaSettings, get_idea_settings

__all__ = [
    "Idea",
    "IdeaApplication",
    "IdeaField",
    "IdeaNotFoundError",
    "IdeaSettings",
    "IdeaTitle",
    "InMemoryIdeaRepository",
    "TagId",
    "get_idea_settings",
]
