"""Configuration module - public API.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    StoreSettings: Data store client settings class

Example:
    ```python
    from storeclient.configuration import settings

    delay = settings.datastore.retry_delay_seconds
    ```
"""

from storeclient.configuration.settings import Settings, settings
from storeclient.configuration.store import StoreSettings

__all__ = ["Settings", "StoreSettings", "settings"]
