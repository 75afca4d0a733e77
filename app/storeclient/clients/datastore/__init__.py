"""Data store client.

Exports the StoreClient facade, its result types, the backend protocols and
the in-memory backend.
"""

from storeclient.clients.datastore.async_result import AsyncResult, AsyncResultState
from storeclient.clients.datastore.client import StoreClient, StoreHandle
from storeclient.clients.datastore.executor import get_executor, shutdown_executor
from storeclient.clients.datastore.memory import InMemoryBackend, InMemoryDataStore
from storeclient.clients.datastore.models import (
    KeyInfo,
    KeyPages,
    StoreEntry,
    VersionInfo,
)
from storeclient.clients.datastore.protocols import (
    DataStore,
    DataStoreBackend,
    TransformFunction,
)

__all__ = [
    "AsyncResult",
    "AsyncResultState",
    "DataStore",
    "DataStoreBackend",
    "InMemoryBackend",
    "InMemoryDataStore",
    "KeyInfo",
    "KeyPages",
    "StoreClient",
    "StoreEntry",
    "StoreHandle",
    "TransformFunction",
    "VersionInfo",
    "get_executor",
    "shutdown_executor",
]
