"""Protocols for the remote data store collaborator.

The client never talks to a transport directly. A `DataStoreBackend` is
injected into `StoreClient.new` and opens `DataStore` objects; both are
structural protocols, so any object with the right methods qualifies.

Backends signal a temporary failure by raising `TransientBackendError` (or
any other non-permanent exception) and a fatal one by raising a
`PermanentStoreError` subclass such as `ValidationError`.
"""

from datetime import datetime
from typing import Any, Callable, List, Optional, Protocol, Sequence, runtime_checkable

from storeclient.clients.datastore.models import KeyPages, StoreEntry, VersionInfo

TransformFunction = Callable[[Optional[Any]], Optional[Any]]


@runtime_checkable
class DataStore(Protocol):
    """One opened store (a name within a scope) on the backend."""

    def get(self, key: str, options: Optional[Any] = None) -> Optional[StoreEntry]:
        ...

    def set(
        self,
        key: str,
        value: Any,
        user_ids: Optional[Sequence[int]] = None,
        options: Optional[Any] = None,
    ) -> str:
        """Write `value` and return the new version id."""
        ...

    def update(self, key: str, transform: TransformFunction) -> Any:
        """Atomically apply `transform` to the stored value.

        The backend detects concurrent writers and re-invokes `transform`
        as needed. Returning None from `transform` aborts the write.
        """
        ...

    def increment(
        self,
        key: str,
        delta: int = 1,
        user_ids: Optional[Sequence[int]] = None,
        options: Optional[Any] = None,
    ) -> int:
        ...

    def remove(self, key: str) -> Optional[StoreEntry]:
        """Remove `key`, returning the value it held. The version is retained."""
        ...

    def get_version(self, key: str, version: str) -> Optional[StoreEntry]:
        ...

    def get_version_at_time(
        self, key: str, timestamp: datetime
    ) -> Optional[StoreEntry]:
        ...

    def remove_version(self, key: str, version: str) -> None:
        ...

    def list_keys(
        self,
        prefix: str = "",
        page_size: int = 50,
        cursor: Optional[str] = None,
        exclude_deleted: bool = False,
    ) -> KeyPages:
        ...

    def list_versions(
        self,
        key: str,
        ascending: bool = True,
        min_time: Optional[datetime] = None,
        max_time: Optional[datetime] = None,
    ) -> List[VersionInfo]:
        ...


@runtime_checkable
class DataStoreBackend(Protocol):
    """Entry point of the remote service: opens stores and reports access."""

    def open_store(
        self, name: str, scope: str, options: Optional[Any] = None
    ) -> DataStore:
        ...

    def check_access(self) -> bool:
        """Return True when the environment can reach the service."""
        ...
