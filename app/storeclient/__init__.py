"""Resilient client for a remote key-value data store.

Example:
    from storeclient import InMemoryBackend, StoreClient

    client = StoreClient.new("PlayerData", backend=InMemoryBackend())
    client.set("player_1", {"coins": 10}).unwrap()
    entry = client.get("player_1")
"""

from storeclient.clients.datastore import (
    AsyncResult,
    AsyncResultState,
    DataStore,
    DataStoreBackend,
    InMemoryBackend,
    KeyInfo,
    KeyPages,
    StoreClient,
    StoreEntry,
    StoreHandle,
    VersionInfo,
    shutdown_executor,
)
from storeclient.exceptions import (
    CapabilityWarning,
    DataStoreError,
    PermanentStoreError,
    RetryExhaustedError,
    TransientBackendError,
    UnsupportedOperationError,
    ValidationError,
)
from storeclient.resilience import RetryExecutor

__version__ = "0.1.0"

__all__ = [
    "AsyncResult",
    "AsyncResultState",
    "CapabilityWarning",
    "DataStore",
    "DataStoreBackend",
    "DataStoreError",
    "InMemoryBackend",
    "KeyInfo",
    "KeyPages",
    "PermanentStoreError",
    "RetryExecutor",
    "RetryExhaustedError",
    "StoreClient",
    "StoreEntry",
    "StoreHandle",
    "TransientBackendError",
    "UnsupportedOperationError",
    "ValidationError",
    "VersionInfo",
    "shutdown_executor",
]
