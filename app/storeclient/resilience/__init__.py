"""Resilience primitives for data store operations."""

from storeclient.resilience.retry import (
    DEFAULT_DELAY_SECONDS,
    MAX_ATTEMPTS,
    RetryExecutor,
    capture_call_site,
)

__all__ = [
    "DEFAULT_DELAY_SECONDS",
    "MAX_ATTEMPTS",
    "RetryExecutor",
    "capture_call_site",
]
