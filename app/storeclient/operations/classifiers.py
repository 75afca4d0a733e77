"""Error classifier for data store exceptions.

Converts exceptions raised by store operations into standardized
OperationResult objects, so callers that prefer result objects over
exceptions get one consistent shape.

Usage:
    from storeclient.operations.classifiers import classify_store_error

    try:
        value = client.get("player_1")
    except Exception as exc:
        return classify_store_error(exc)
"""

from storeclient.exceptions import (
    PermanentStoreError,
    RetryExhaustedError,
    TransientBackendError,
    UnsupportedOperationError,
    ValidationError,
)
from storeclient.operations.result import OperationResult


def classify_store_error(exc: BaseException) -> OperationResult:
    """Classify a data store exception into an OperationResult.

    Mapping:
    - TransientBackendError → TRANSIENT_ERROR (TRANSIENT)
    - ValidationError → PERMANENT_ERROR (VALIDATION_ERROR)
    - UnsupportedOperationError → PERMANENT_ERROR (UNSUPPORTED)
    - RetryExhaustedError → PERMANENT_ERROR (RETRY_EXHAUSTED)
    - Other PermanentStoreError → PERMANENT_ERROR (PERMANENT)
    - Anything else → PERMANENT_ERROR (UNEXPECTED_ERROR)

    Args:
        exc: Exception raised by a store operation

    Returns:
        OperationResult carrying the status, message, error code and the
        original exception
    """
    message = f"{type(exc).__name__}: {exc}"

    if isinstance(exc, TransientBackendError):
        return OperationResult.transient_error(
            message, error_code="TRANSIENT", error=exc
        )

    # An exhausted budget is terminal for the client even though every
    # individual attempt may have been transient.
    if isinstance(exc, RetryExhaustedError):
        return OperationResult.permanent_error(
            message, error_code="RETRY_EXHAUSTED", error=exc
        )

    if isinstance(exc, ValidationError):
        return OperationResult.permanent_error(
            message, error_code="VALIDATION_ERROR", error=exc
        )

    if isinstance(exc, UnsupportedOperationError):
        return OperationResult.permanent_error(
            message, error_code="UNSUPPORTED", error=exc
        )

    if isinstance(exc, PermanentStoreError):
        return OperationResult.permanent_error(
            message, error_code="PERMANENT", error=exc
        )

    return OperationResult.permanent_error(
        message, error_code="UNEXPECTED_ERROR", error=exc
    )
