"""Provisio Infra Observability -- structlog logging and correlation ids."""

from __future__ import annotations

from provisio.infra.observability.correlation import (
    CorrelationSettings,
    UuidCorrelationIdProvider,
    bind_correlation_id,
)
from provisio.infra.observability.logging import (
    LoggingSettings,
    configure_logging,
    get_logger,
)

__all__ = [
    "CorrelationSettings",
    "LoggingSettings",
    "UuidCorrelationIdProvider",
    "bind_correlation_id",
    "configure_logging",
    "get_logger",
]
