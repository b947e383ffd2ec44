"""Event-scoped context: the correlation ID of the event being processed."""

import uuid
from contextvars import ContextVar

# Context variable for storing correlation ID across async boundaries
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


class RequestContext:
    """Async-safe storage for data scoped to a single inbound event.

    Every invocation of the server pipeline runs in its own task, so the
    value set here never leaks into a concurrent invocation.
    """

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context."""
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context.

        Returns:
            str | None: The correlation ID if set, None otherwise.
        """
        return _correlation_id_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables."""
        _correlation_id_var.set(None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracking.

    Returns:
        str: A string representation of a UUID4.

    Examples:
        >>> len(generate_correlation_id())
        36
    """
    return str(uuid.uuid4())
