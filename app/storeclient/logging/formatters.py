"""Log processors for the store client.

`configure_logging` plugs these into the structlog pipeline. Store options
are free-form dicts handed to backends and may carry credentials, so
masking descends into nested dicts. Stored values can be large, so long
strings are cut short.
"""

from typing import Any, Callable

Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]

# Key fragments whose values are masked in logs
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "private_key",
        "cookie",
    }
)

REDACTED = "***REDACTED***"


def add_app_info(app_name: str, app_version: str = "unknown") -> Processor:
    """Stamp every entry with `app_name` and `app_version`."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def _mask(value: Any, patterns: frozenset[str], mask_value: str) -> Any:
    if not isinstance(value, dict):
        return value
    masked = {}
    for key, inner in value.items():
        if inner is not None and any(p in str(key).lower() for p in patterns):
            masked[key] = mask_value
        else:
            masked[key] = _mask(inner, patterns, mask_value)
    return masked


def mask_sensitive_data(
    mask_value: str = REDACTED,
    additional_patterns: frozenset[str] | None = None,
) -> Processor:
    """Mask values whose key contains a sensitive pattern.

    Matching is case-insensitive and applies at every level of nested
    dicts, so `options={"auth": {"api_key": ...}}` is masked too. None
    values are left alone.

    Args:
        mask_value: Replacement for masked values
        additional_patterns: Extra key fragments to mask, e.g.
            `frozenset({"value"})` to keep stored values out of logs
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return _mask(event_dict, patterns, mask_value)

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Cut string values longer than `max_length` characters."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
