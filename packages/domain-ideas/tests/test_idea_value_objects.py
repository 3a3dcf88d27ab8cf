"""Tests for Idea value objects."""

from __future__ import annotations

import pytest

from provisio.domain.ideas.idea_value_objects import IdeaField, IdeaTitle
from provisio.foundation.domain.exceptions import ValidationError


@pytest.mark.unit
class TestIdeaField:
    def test_parse_known_fields(self) -> None:
        assert IdeaField.parse("title") is IdeaField.TITLE
        assert IdeaField.parse("description") is IdeaField.DESCRIPTION

    def test_parse_unknown_field(self) -> None:
        with pytest.raises(ValidationError, match="Unknown idea field 'tags'") as exc_info:
            IdeaField.parse("tags")
        assert exc_info.value.context["field"] == "field"

    def test_members_are_strings(self) -> None:
        assert IdeaField.TITLE == "title"


@pytest.mark.unit
class TestIdeaTitle:
    def test_strips_whitespace(self) -> None:
        assert IdeaTitle("  Awesome idea ").value == "Awesome idea"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_rejected(self, value: str) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            IdeaTitle(value)

    def test_max_length(self) -> None:
        assert IdeaTitle("x" * 255).value == "x" * 255
        with pytest.raises(ValidationError, match="too long"):
            IdeaTitle("x" * 256)
