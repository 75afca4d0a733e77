"""Operation result types and status enums.

This module contains the standardized result type for data store operations,
the status enum, and the error classifier for store exceptions.
"""

from storeclient.operations.classifiers import classify_store_error
from storeclient.operations.result import OperationResult
from storeclient.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_store_error",
]
