"""Value objects for the Idea aggregate.

Immutable, validated domain primitives. All validation occurs at
construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from provisio.foundation.domain.exceptions import ValidationError

TagId = str | int
"""Tag identifier as issued by the tag catalogue (numeric or slug)."""


class IdeaField(StrEnum):
    """Text fields of an Idea that ``FieldChanged`` may overwrite.

    Uses StrEnum for native JSON serialization.
    """

    TITLE = "title"
    DESCRIPTION = "description"

    @classmethod
    def parse(cls, name: str) -> IdeaField:
        """Return the member named ``name``.

        Raises:
            ValidationError: If ``name`` is not a changeable field.
        """
        try:
            return cls(name)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(
                "field", f"Unknown idea field '{name}' (expected one of: {allowed})"
            ) from None


@dataclass(frozen=True, slots=True)
class IdeaTitle:
    """Validated idea title.

    Stripped of surrounding whitespace, 1-255 chars.

    Attributes:
        value: The validated title string.

    Raises:
        ValidationError: If title is empty or too long.
    """

    value: str

    def __post_init__(self) -> None:
        stripped = self.value.strip()
        if not stripped:
            raise ValidationError("title", "Idea title cannot be empty")
        if len(stripped) > 255:
            raise ValidationError("title", f"Idea title too long: {len(stripped)} chars (max 255)")
        object.__setattr__(self, "value", stripped)
