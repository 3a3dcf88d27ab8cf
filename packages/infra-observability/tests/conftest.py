"""Shared fixtures for infra-observability tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog

from provisio.infra.observability.correlation import get_correlation_settings
from provisio.infra.observability.logging import get_logging_settings


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() so other tests see pristine logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    get_logging_settings.cache_clear()
    get_correlation_settings.cache_clear()
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    get_logging_settings.cache_clear()
    get_correlation_settings.cache_clear()
