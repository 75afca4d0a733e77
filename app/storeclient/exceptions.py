"""Custom exceptions for the data store client.

Provides the error taxonomy shared by the retry executor, the store client
and backend implementations.
"""

from typing import Optional


class DataStoreError(Exception):
    """Base exception for all data store client errors.

    Example:
        try:
            client.get("player_1")
        except DataStoreError as e:
            logger.error("datastore_error", error=str(e))
    """

    pass


class TransientBackendError(DataStoreError):
    """Raised by a backend when a single attempt failed for a temporary reason.

    Throttling, timeouts and temporary unavailability belong here. The retry
    executor absorbs these until the attempt budget runs out.
    """

    pass


class PermanentStoreError(DataStoreError):
    """Base class for failures that must never be retried."""

    pass


class ValidationError(PermanentStoreError):
    """Raised when an argument or a backend response has the wrong shape.

    Example:
        >>> client.increment("coins", 1.5).unwrap()
        Traceback (most recent call last):
        ...
        ValidationError: increment delta must be an integer, got float
    """

    pass


class UnsupportedOperationError(PermanentStoreError):
    """Raised for operations the client declares but does not implement.

    Example:
        >>> client.on_update("player_1", print)
        Traceback (most recent call last):
        ...
        UnsupportedOperationError: on_update is not supported
    """

    pass


class RetryExhaustedError(DataStoreError):
    """Raised when every attempt in the retry budget failed.

    Attributes:
        operation: Name of the operation that was retried
        attempts: Number of attempts made
        last_error: Exception raised by the final attempt
        call_site: Formatted stack of the place the operation was requested
    """

    def __init__(
        self,
        operation: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
        call_site: str = "",
    ) -> None:
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        self.call_site = call_site
        message = f"{operation} failed after {attempts} attempts"
        if last_error is not None:
            message = f"{message}: {type(last_error).__name__}: {last_error}"
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.call_site:
            return base
        return f"{base}\nRequested at:\n{self.call_site}"


class CapabilityWarning(UserWarning):
    """Emitted when the environment cannot reach the backend.

    The access probe is best-effort, so this is a warning and never an error.
    """

    pass
