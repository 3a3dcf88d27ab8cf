"""Port interface for delivering locally authored events to the authority.

The transport is the outbound half of the reconciliation loop: commands
publish the events they author, and the authority later answers with a
batch that confirms or rejects them (fed back through ``reconcile``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from provisio.foundation.domain.events import BaseEvent


@runtime_checkable
class EventTransportPort(Protocol):
    """Port for outbound event delivery.

    Implementations own timeouts and retries. ``publish`` must keep the
    order of ``events``; at most one batch per aggregate is in flight.
    """

    def publish(self, events: Sequence[BaseEvent]) -> None:
        """Send locally authored events to the authority.

        Args:
            events: Events in the order they were applied locally.
        """
        ...
