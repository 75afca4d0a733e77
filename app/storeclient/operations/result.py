"""Operation result dataclass.

Uniform result type for data store operations, including status, data, and
error information.
"""

from typing import Optional, Any
from dataclasses import dataclass

from storeclient.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from operations.

    Attributes:
        status: OperationStatus -- high-level outcome
        message: str -- human-friendly message for logs/troubleshooting
        data: Optional[Any] -- optional payload (stored entry, version, etc.)
        error_code: Optional[str] -- optional machine error code
        error: Optional[BaseException] -- the exception behind an error result
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def is_success(self) -> bool:
        """Helper property to check if operation was successful.

        Returns:
            True if status is SUCCESS, False otherwise
        """
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        """Create a SUCCESS OperationResult with optional data.

        Args:
            data: Optional payload to include with the result
            message: Human-friendly success message

        Returns:
            OperationResult with SUCCESS status
        """
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> "OperationResult":
        """Create a transient (retryable) error result.

        Use for errors that may succeed on retry, such as:
        - Network timeouts
        - Throttling by the backend
        - Temporary service unavailability

        Args:
            message: Human-friendly error message
            error_code: Optional machine error code
            error: Optional originating exception

        Returns:
            OperationResult with TRANSIENT_ERROR status
        """
        return cls(
            status=OperationStatus.TRANSIENT_ERROR,
            message=message,
            error_code=error_code,
            error=error,
        )

    @classmethod
    def permanent_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> "OperationResult":
        """Create a permanent (non-retryable) error result.

        Use for errors that will not succeed on retry, such as:
        - Validation errors
        - Unsupported operations
        - An exhausted retry budget

        Args:
            message: Human-friendly error message
            error_code: Optional machine error code
            error: Optional originating exception

        Returns:
            OperationResult with PERMANENT_ERROR status
        """
        return cls(
            status=OperationStatus.PERMANENT_ERROR,
            message=message,
            error_code=error_code,
            error=error,
        )
