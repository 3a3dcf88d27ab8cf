"""Domain port interfaces for hexagonal architecture.

Ports define abstract interfaces that the domain layer uses to interact
with external collaborators. Implementations (adapters) live in
infrastructure.
"""

from provisio.foundation.domain.ports.correlation_ids import CorrelationIdProviderPort
from provisio.foundation.domain.ports.event_transport import EventTransportPort
from provisio.foundation.domain.ports.repository import AggregateRepositoryPort

__all__ = ["AggregateRepositoryPort", "CorrelationIdProviderPort", "EventTransportPort"]
