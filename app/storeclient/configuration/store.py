"""Data store client settings."""

from pydantic import Field, field_validator

from storeclient.configuration.base import InfrastructureSettings


class StoreSettings(InfrastructureSettings):
    """Data store client configuration.

    Environment Variables:
        DATASTORE_DEFAULT_SCOPE: Scope used when a store is opened without one
            (default: "global")
        DATASTORE_RETRY_DELAY_SECONDS: Fixed delay between retry attempts
            (default: 1.0)
        DATASTORE_MAX_WORKERS: Worker threads running store operations
            (default: 8)
        DATASTORE_LIST_PAGE_SIZE: Default page size for key listings
            (default: 50)
        DATASTORE_CAPABILITY_CHECK: Probe backend access before the first
            store is opened (default: True)

    The attempt budget is not configurable; every operation gets five
    attempts.

    Example:
        ```python
        from storeclient.configuration import settings

        delay = settings.datastore.retry_delay_seconds
        ```
    """

    default_scope: str = Field(
        default="global",
        alias="DATASTORE_DEFAULT_SCOPE",
        description="Scope used when a store is opened without one",
    )
    retry_delay_seconds: float = Field(
        default=1.0,
        alias="DATASTORE_RETRY_DELAY_SECONDS",
        description="Fixed delay between retry attempts (seconds)",
    )
    max_workers: int = Field(
        default=8,
        alias="DATASTORE_MAX_WORKERS",
        description="Worker threads running store operations",
    )
    list_page_size: int = Field(
        default=50,
        alias="DATASTORE_LIST_PAGE_SIZE",
        description="Default page size for key listings",
    )
    capability_check: bool = Field(
        default=True,
        alias="DATASTORE_CAPABILITY_CHECK",
        description="Probe backend access before the first store is opened",
    )

    @field_validator("retry_delay_seconds")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("retry_delay_seconds must be >= 0")
        return value

    @field_validator("max_workers", "list_page_size")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("value must be at least 1")
        return value
