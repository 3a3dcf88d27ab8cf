"""Port interface for keyed aggregate lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

A = TypeVar("A")


@runtime_checkable
class AggregateRepositoryPort(Protocol[A]):
    """Port for a keyed container of live aggregates.

    Implementations raise a NotFoundError subclass from ``get`` when the
    identifier is unknown, and ConflictError from ``add`` on duplicates.
    """

    def get(self, aggregate_id: UUID) -> A:
        """Return the aggregate with ``aggregate_id``."""
        ...

    def add(self, aggregate: A) -> None:
        """Register a newly created aggregate."""
        ...

    def __contains__(self, aggregate_id: object) -> bool: ...
