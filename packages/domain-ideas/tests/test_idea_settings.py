"""Tests for IdeaSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from provisio.domain.ideas.settings import IdeaSettings, get_idea_settings


@pytest.mark.unit
class TestIdeaSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("IDEAS_MAX_BATCH_SIZE", raising=False)
        monkeypatch.delenv("IDEAS_LOCK_TIMEOUT_SECONDS", raising=False)
        settings = IdeaSettings(_env_file=None)  # type: ignore[call-arg]
        assert settings.max_batch_size == 50_000
        assert settings.lock_timeout_seconds == 5.0

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IDEAS_MAX_BATCH_SIZE", "100")
        monkeypatch.setenv("IDEAS_LOCK_TIMEOUT_SECONDS", "0.5")
        settings = IdeaSettings(_env_file=None)  # type: ignore[call-arg]
        assert settings.max_batch_size == 100
        assert settings.lock_timeout_seconds == 0.5

    @pytest.mark.parametrize(
        ("field", "value"),
        [("max_batch_size", 0), ("lock_timeout_seconds", 0), ("lock_timeout_seconds", -1.0)],
    )
    def test_rejects_out_of_range(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            IdeaSettings(**{field: value})

    def test_get_idea_settings_is_cached(self) -> None:
        assert get_idea_settings() is get_idea_settings()
