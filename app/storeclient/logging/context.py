"""Context binding for structured logging.

Binds a correlation id (and any extra metadata) to every log entry emitted
inside a block. The store client copies the current context into its worker
threads, so retries and backend failures logged there carry the same id.

Usage:
    from storeclient.logging import bind_log_context

    with bind_log_context(correlation_id="job-123", job="nightly_reset"):
        client.set("player_1", {"coins": 0}).unwrap()

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator

import structlog


@contextmanager
def bind_log_context(
    correlation_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind context to all logs within the context manager.

    Args:
        correlation_id: Unique identifier. Auto-generated if not provided.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_log_context() -> None:
    """Clear all bound context from the logging context."""
    structlog.contextvars.clear_contextvars()
