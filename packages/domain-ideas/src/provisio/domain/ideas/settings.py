"""Idea application configuration using Pydantic settings.

Settings are loaded from environment variables prefixed ``IDEAS_`` and
validated using Pydantic.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdeaSettings(BaseSettings):
    """Configuration for ``IdeaApplication``.

    Environment Variables:
        IDEAS_MAX_BATCH_SIZE: Largest authoritative batch accepted by
            ``receive()`` (default: 50000).
        IDEAS_LOCK_TIMEOUT_SECONDS: How long a call waits for another
            writer to release an idea (default: 5.0).

    Example:
        >>> settings = IdeaSettings(max_batch_size=1000)
        >>> settings.lock_timeout_seconds
        5.0
    """

    model_config = SettingsConfigDict(
        env_prefix="IDEAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_batch_size: int = Field(
        default=50_000,
        ge=1,
        description="Maximum number of events in one authoritative batch",
    )
    lock_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for exclusive access to an idea",
    )


@lru_cache(maxsize=1)
def get_idea_settings() -> IdeaSettings:
    """Get cached IdeaSettings instance.

    Clear cache with ``get_idea_settings.cache_clear()`` for testing.
    """
    return IdeaSettings()
