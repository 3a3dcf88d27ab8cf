"""Port interface for correlation id generation.

Every locally authored event carries a correlation id so the authority can
confirm or reject it later. The aggregate does not generate these tokens;
it draws them from a provider injected by the caller.

Example:
    >>> from provisio.foundation.domain.ports import CorrelationIdProviderPort
    >>> def stamp(provider: CorrelationIdProviderPort) -> str:
    ...     return provider.next_correlation_id()
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CorrelationIdProviderPort(Protocol):
    """Port for correlation id generation.

    Implementations must return a globally unique, non-empty token on every
    call. The protocol is runtime_checkable to enable isinstance()
    verification in tests and dependency injection validation.

    Example:
        >>> class Sequential:
        ...     def __init__(self) -> None:
        ...         self._n = 0
        ...
        ...     def next_correlation_id(self) -> str:
        ...         self._n += 1
        ...         return f"c-{self._n}"
        >>> isinstance(Sequential(), CorrelationIdProviderPort)
        True
    """

    def next_correlation_id(self) -> str:
        """Return a fresh, unique correlation id."""
        ...
