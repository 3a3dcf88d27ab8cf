"""Shared fixtures for domain-ideas tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from typing import Any

import pytest

from provisio.domain.ideas.idea import Idea
from provisio.domain.ideas.settings import get_idea_settings


class SequentialCorrelationIds:
    """Deterministic correlation id provider: c-1, c-2, ..."""

    def __init__(self) -> None:
        self._n = 0

    def next_correlation_id(self) -> str:
        self._n += 1
        return f"c-{self._n}"


@pytest.fixture()
def correlation_ids() -> SequentialCorrelationIds:
    return SequentialCorrelationIds()


@pytest.fixture()
def idea(correlation_ids: SequentialCorrelationIds) -> Idea:
    """A freshly created, fully confirmed Idea."""
    return Idea.create(title="1st idea", correlation_ids=correlation_ids)


@pytest.fixture()
def remote_title_change() -> Callable[..., Idea.FieldChanged]:
    """Factory for authoritative title changes authored by another actor."""

    def _make(idea: Idea, title: str, correlation_id: str | None = None) -> Idea.FieldChanged:
        return Idea.FieldChanged(
            originator_id=idea.id,  # type: ignore[arg-type]
            originator_version=idea.version + 1,
            timestamp=datetime.now(UTC),
            correlation_id=correlation_id,
            field="title",  # type: ignore[arg-type]
            value=title,
        )

    return _make


@pytest.fixture()
def rejection() -> Callable[..., Idea.Rejected]:
    """Factory for rejections of a locally authored event."""

    def _make(idea: Idea, correlation_id: str, **kwargs: Any) -> Idea.Rejected:
        return Idea.Rejected(
            originator_id=idea.id,  # type: ignore[arg-type]
            originator_version=idea.version,
            timestamp=datetime.now(UTC),
            correlation_id=correlation_id,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_idea_settings.cache_clear()
    yield
    get_idea_settings.cache_clear()
