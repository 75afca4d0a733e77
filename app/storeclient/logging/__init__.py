"""Structured logging for the store client using structlog.

Public API:
    - configure_logging(): Initialize logging
    - get_module_logger(): Get a logger for the calling module
    - bind_log_context(): Context manager binding a correlation id
    - get_correlation_id(): Get current correlation ID from context
    - clear_log_context(): Clear all bound context

Example:
    from storeclient.logging import configure_logging, get_module_logger

    configure_logging()
    logger = get_module_logger()
    logger.info("module_initialized")
"""

from storeclient.logging.setup import (
    configure_logging,
    get_module_logger,
)
from storeclient.logging.context import (
    bind_log_context,
    get_correlation_id,
    clear_log_context,
)
from storeclient.logging.formatters import (
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
    SENSITIVE_PATTERNS,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_log_context",
    "get_correlation_id",
    "clear_log_context",
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
