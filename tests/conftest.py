"""Shared fixtures for integration tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

import pytest
import structlog

from provisio.domain.ideas import IdeaApplication, IdeaSettings, InMemoryIdeaRepository
from provisio.foundation.domain.events import BaseEvent
from provisio.infra.observability import UuidCorrelationIdProvider


class InMemoryAuthority:
    """Stands in for the remote authority behind the event transport.

    Collects published events; the test decides which are confirmed and
    which are rejected.
    """

    def __init__(self) -> None:
        self.inbox: list[BaseEvent] = []

    def publish(self, events: Sequence[BaseEvent]) -> None:
        self.inbox.extend(events)

    def drain(self) -> list[BaseEvent]:
        events, self.inbox = self.inbox, []
        return events


@pytest.fixture()
def authority() -> InMemoryAuthority:
    return InMemoryAuthority()


@pytest.fixture()
def idea_app(authority: InMemoryAuthority) -> IdeaApplication:
    """IdeaApplication wired to in-memory adapters."""
    return IdeaApplication(
        InMemoryIdeaRepository(),
        UuidCorrelationIdProvider(prefix="it-"),
        transport=authority,
        settings=IdeaSettings(max_batch_size=50_000, lock_timeout_seconds=1.0),
    )


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
