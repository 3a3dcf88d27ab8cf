"""Correlation id generation and log context binding.

``UuidCorrelationIdProvider`` implements ``CorrelationIdProviderPort`` with
random UUIDs, so ids stay unique across processes without coordination.
``bind_correlation_id`` attaches an id to every log line emitted while the
caller processes that event.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from functools import lru_cache
from typing import TYPE_CHECKING

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import Iterator


class CorrelationSettings(BaseSettings):
    """Correlation id configuration.

    Environment Variables:
        CORRELATION_PREFIX: Prefix prepended to generated ids (default: "").
    """

    model_config = SettingsConfigDict(env_prefix="CORRELATION_", extra="ignore")

    prefix: str = Field(
        default="",
        max_length=32,
        description="Prefix for generated correlation ids",
    )


@lru_cache(maxsize=1)
def get_correlation_settings() -> CorrelationSettings:
    """Get cached CorrelationSettings instance."""
    return CorrelationSettings()


class UuidCorrelationIdProvider:
    """Correlation id provider implementing CorrelationIdProviderPort.

    Args:
        prefix: Optional prefix; defaults to ``CORRELATION_PREFIX``.

    Example:
        >>> provider = UuidCorrelationIdProvider(prefix="web-")
        >>> provider.next_correlation_id().startswith("web-")
        True
    """

    def __init__(self, prefix: str | None = None) -> None:
        self._prefix = get_correlation_settings().prefix if prefix is None else prefix

    def next_correlation_id(self) -> str:
        return f"{self._prefix}{uuid.uuid4()}"


@contextmanager
def bind_correlation_id(correlation_id: str) -> Iterator[None]:
    """Bind ``correlation_id`` to the structlog context for the block."""
    with structlog.contextvars.bound_contextvars(correlation_id=correlation_id):
        yield
