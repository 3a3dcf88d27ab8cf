"""Domain exception hierarchy for type-safe error handling.

This module provides the base exception hierarchy for all domain errors.
Exceptions include structured error codes and context so callers of the
aggregate commands and of batch reconciliation can react consistently.

Example:
    >>> from provisio.foundation.domain.exceptions import UnknownEventKindError
    >>> raise UnknownEventKindError("Idea.Archived")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

__all__ = [
    "ConflictError",
    "DomainError",
    "InvalidCommandPreconditionError",
    "InvalidStateTransitionError",
    "NotFoundError",
    "ResourceLimitExceededError",
    "UnknownCorrelationError",
    "UnknownEventKindError",
    "ValidationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Provides error code and structured context for debugging. All domain
    exceptions inherit from this class to enable consistent handling and
    logging.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (aggregate IDs, field names).

    Example:
        >>> raise DomainError("Operation failed", context={"aggregate_id": "123"})
        DomainError: Operation failed (aggregate_id=123)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
                     Values are typically strings, UUIDs, or primitive types.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist.

    Use when aggregate lookup fails or an entity cannot be found by
    identifier.

    Attributes:
        error_code: "RESOURCE_NOT_FOUND" (class constant).
        resource_type: Type of missing resource.
        resource_id: Identifier of missing resource.

    Example:
        >>> from uuid import UUID
        >>> raise NotFoundError("Idea", UUID("550e8400-e29b-41d4-a716-446655440000"))
        NotFoundError: Idea not found: 550e8400-e29b-41d4-a716-446655440000
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of resource (e.g., "Idea").
            resource_id: Identifier of missing resource. UUID is converted to string.
            **extra_context: Additional debugging context.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class ValidationError(DomainError):
    """Raised when input fails domain validation rules.

    Attributes:
        error_code: "VALIDATION_ERROR" (class constant).
        field: Field path that failed validation.
        reason: Human-readable validation failure reason.

    Example:
        >>> raise ValidationError("field", "Unknown idea field 'colour'")
        ValidationError: Validation failed for 'field': Unknown idea field 'colour'
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            field: Field path that failed validation.
            reason: Human-readable validation failure reason.
            **extra_context: Additional debugging context.
        """
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class ConflictError(DomainError):
    """Raised when operation conflicts with current state.

    Use for duplicate correlation ids, duplicate aggregate registration,
    or an aggregate that stays locked by another writer.

    Attributes:
        error_code: "CONFLICT" (class constant).
        reason: Description of the conflict.

    Example:
        >>> raise ConflictError("Duplicate correlation id", correlation_id="c-1")
        ConflictError: Conflict: Duplicate correlation id (correlation_id=c-1)
    """

    error_code: str = "CONFLICT"

    def __init__(
        self,
        reason: str,
        **context: Any,
    ) -> None:
        """Initialize conflict error.

        Args:
            reason: Description of conflict.
            **context: Additional debugging context.
        """
        self.reason = reason
        message = f"Conflict: {reason}"
        super().__init__(message, context)


class InvalidStateTransitionError(ConflictError):
    """Raised when a state machine transition is not allowed.

    Attributes:
        error_code: "INVALID_STATE_TRANSITION" (class constant).
    """

    error_code: str = "INVALID_STATE_TRANSITION"

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize invalid state transition error.

        Args:
            message: Description of the invalid transition attempt.
            **context: Additional debugging context (e.g., current_state, target_state).
        """
        super().__init__(message, **context)


class InvalidCommandPreconditionError(InvalidStateTransitionError):
    """Raised when a command or event arrives before the aggregate can accept it.

    The typical case is mutating an aggregate whose creation event has not
    been applied yet, or applying a second creation event.

    Example:
        >>> raise InvalidCommandPreconditionError(
        ...     "Cannot change title: idea has not been created"
        ... )
    """

    error_code: str = "INVALID_COMMAND_PRECONDITION"


class UnknownEventKindError(DomainError):
    """Raised when no applier handler is registered for an event class.

    Fatal to the command or batch being processed. Raised before the
    aggregate is mutated.

    Attributes:
        error_code: "UNKNOWN_EVENT_KIND" (class constant).
        event_kind: Qualified name of the unhandled event class.
    """

    error_code: str = "UNKNOWN_EVENT_KIND"

    def __init__(self, event_kind: str, **extra_context: Any) -> None:
        self.event_kind = event_kind
        message = f"No handler registered for event kind '{event_kind}'"
        super().__init__(message, {"event_kind": event_kind, **extra_context})


class UnknownCorrelationError(DomainError):
    """Raised when a correlation id is not present locally.

    Reconciliation treats it as already resolved and skips the entry, so
    duplicate delivery of a rejection cannot corrupt state.

    Attributes:
        error_code: "UNKNOWN_CORRELATION" (class constant).
        correlation_id: The correlation id that was looked up.
    """

    error_code: str = "UNKNOWN_CORRELATION"

    def __init__(self, correlation_id: str, **extra_context: Any) -> None:
        self.correlation_id = correlation_id
        message = f"Unknown correlation id: {correlation_id}"
        super().__init__(message, {"correlation_id": correlation_id, **extra_context})


class ResourceLimitExceededError(DomainError):
    """Raised when an input exceeds a configured limit.

    Attributes:
        error_code: "RESOURCE_LIMIT_EXCEEDED" (class constant).
        resource: Resource type key (e.g., "batch_events").
        limit: Maximum allowed count.
        current: Count that was offered.

    Example:
        >>> raise ResourceLimitExceededError("batch_events", limit=100, current=101)
        ResourceLimitExceededError: Limit of 100 batch_events exceeded (got 101)
    """

    error_code: str = "RESOURCE_LIMIT_EXCEEDED"

    def __init__(
        self,
        resource: str,
        limit: int,
        current: int,
        **extra_context: Any,
    ) -> None:
        """Initialize resource limit exceeded error.

        Args:
            resource: Resource type (e.g., "batch_events").
            limit: Maximum allowed value.
            current: Offered count.
            **extra_context: Additional debugging context.
        """
        self.resource = resource
        self.limit = limit
        self.current = current
        message = f"Limit of {limit} {resource} exceeded (got {current})"
        context = {
            "resource": resource,
            "limit": limit,
            "current": current,
            **extra_context,
        }
        super().__init__(message, context)
