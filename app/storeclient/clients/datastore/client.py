"""Resilient client for one remote data store.

StoreClient wraps every backend operation the same way: a zero-argument
closure over the backend call is run by a RetryExecutor on a worker thread
and its outcome is delivered as an AsyncResult.

Reads (`get`, `get_version`, `get_version_at_time`, `list_keys`,
`list_versions`, `remove_version`) block the caller until the result is
settled. Writes (`set`, `increment`, `remove`, `update`) return the
AsyncResult for the caller to await or chain.

Example:
    from storeclient import InMemoryBackend, StoreClient

    client = StoreClient.new("PlayerData", backend=InMemoryBackend())
    client.set("player_1", {"coins": 10}).unwrap()
    client.update("player_1", lambda data: {**data, "coins": data["coins"] + 5})
    entry = client.get("player_1")
"""

from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from storeclient.clients.datastore.async_result import AsyncResult
from storeclient.clients.datastore.capability import ensure_backend_access
from storeclient.clients.datastore.executor import get_executor, submit_operation
from storeclient.clients.datastore.models import KeyPages, StoreEntry, VersionInfo
from storeclient.clients.datastore.protocols import (
    DataStore,
    DataStoreBackend,
    TransformFunction,
)
from storeclient.configuration import StoreSettings, settings as app_settings
from storeclient.exceptions import UnsupportedOperationError, ValidationError
from storeclient.logging import get_module_logger
from storeclient.resilience.retry import RetryExecutor, capture_call_site

logger = get_module_logger()

T = TypeVar("T")


@dataclass(frozen=True)
class StoreHandle:
    """Identity of one logical store: a name within a scope.

    Two handles with equal fields address the same remote store.
    """

    name: str
    scope: str
    options: Optional[Any] = None


def _require_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise ValidationError(f"key must be a non-empty string, got {key!r}")


class StoreClient:
    """Client for one remote data store with retry and async delivery.

    Use `StoreClient.new(...)` to open a store; the constructor only wires an
    already-opened store.

    Args:
        handle: Identity of the opened store
        store: The backend store object
        executor: Executor running operations; the shared pool by default
        retry: RetryExecutor applied to every operation
        store_settings: Settings section for defaults such as page size
    """

    def __init__(
        self,
        handle: StoreHandle,
        store: DataStore,
        executor: Optional[Executor] = None,
        retry: Optional[RetryExecutor] = None,
        store_settings: Optional[StoreSettings] = None,
    ) -> None:
        self.handle = handle
        self._store = store
        self._executor = executor
        self._settings = store_settings or app_settings.datastore
        self._retry = retry or RetryExecutor(delay=self._settings.retry_delay_seconds)
        self._logger = logger.bind(store=handle.name, scope=handle.scope)

    @classmethod
    def new(
        cls,
        name: str,
        scope: Optional[str] = None,
        options: Optional[Any] = None,
        *,
        backend: DataStoreBackend,
        executor: Optional[Executor] = None,
        retry_delay: Optional[float] = None,
        store_settings: Optional[StoreSettings] = None,
    ) -> "StoreClient":
        """Open `name` within `scope` on `backend` and return a client for it.

        Each call returns an independent client, even for equal arguments.

        Args:
            name: Store name
            scope: Key namespace; defaults to DATASTORE_DEFAULT_SCOPE
            options: Opaque backend options, passed through untouched
            backend: Backend collaborator opening the store
            executor: Executor for operations; the shared pool by default
            retry_delay: Delay between attempts; DATASTORE_RETRY_DELAY_SECONDS
                by default
            store_settings: Settings section overriding the global one

        Returns:
            A StoreClient bound to the opened store

        Raises:
            ValidationError: Empty name, or the backend returned something
                that is not a data store (not retried)
            RetryExhaustedError: Opening the store failed on every attempt
        """
        if not isinstance(name, str) or not name:
            raise ValidationError(f"store name must be a non-empty string, got {name!r}")

        store_settings = store_settings or app_settings.datastore
        handle = StoreHandle(
            name=name,
            scope=scope or store_settings.default_scope,
            options=options,
        )
        delay = (
            store_settings.retry_delay_seconds if retry_delay is None else retry_delay
        )
        retry = RetryExecutor(delay=delay)

        if store_settings.capability_check:
            ensure_backend_access(backend)

        def _open() -> DataStore:
            store = backend.open_store(handle.name, handle.scope, handle.options)
            if not isinstance(store, DataStore):
                raise ValidationError(
                    f"backend returned {type(store).__name__} instead of a data store "
                    f"for {handle.name!r}"
                )
            return store

        pool = executor or get_executor(store_settings.max_workers)
        call_site = capture_call_site()
        store = submit_operation(
            pool,
            lambda: retry.execute(_open, operation_name="open_store", call_site=call_site),
        ).unwrap()

        logger.info("datastore_opened", store=handle.name, scope=handle.scope)
        return cls(
            handle,
            store,
            executor=executor,
            retry=retry,
            store_settings=store_settings,
        )

    @property
    def name(self) -> str:
        """Name of the opened store."""
        return self.handle.name

    @property
    def scope(self) -> str:
        """Scope the store was opened in."""
        return self.handle.scope

    def _submit(self, operation_name: str, call: Callable[[], T]) -> AsyncResult[T]:
        call_site = capture_call_site()
        retry = self._retry

        def _task() -> T:
            return retry.execute(
                call, operation_name=operation_name, call_site=call_site
            )

        executor = self._executor or get_executor(self._settings.max_workers)
        return submit_operation(executor, _task)

    # Blocking reads

    def get(self, key: str, options: Optional[Any] = None) -> Optional[StoreEntry]:
        """Return the current entry for `key`, or None if the key is absent."""
        _require_key(key)
        return self._submit("get", lambda: self._store.get(key, options)).unwrap()

    def get_version(self, key: str, version: str) -> Optional[StoreEntry]:
        """Return `key` as it was at `version`, or None if there is no such version."""
        _require_key(key)
        return self._submit(
            "get_version", lambda: self._store.get_version(key, version)
        ).unwrap()

    def get_version_at_time(
        self, key: str, timestamp: datetime
    ) -> Optional[StoreEntry]:
        """Return the version of `key` that was current at `timestamp`."""
        _require_key(key)
        return self._submit(
            "get_version_at_time",
            lambda: self._store.get_version_at_time(key, timestamp),
        ).unwrap()

    def list_keys(
        self,
        prefix: str = "",
        page_size: Optional[int] = None,
        cursor: Optional[str] = None,
        exclude_deleted: bool = False,
    ) -> KeyPages:
        """Return a page handle over the keys starting with `prefix`.

        Every page fetch, including those made while advancing or iterating,
        goes through the retry executor.
        """
        size = self._settings.list_page_size if page_size is None else page_size

        def _fetch(after: Optional[str]) -> Tuple[List[str], Optional[str]]:
            pages = self._submit(
                "list_keys",
                lambda: self._store.list_keys(prefix, size, after, exclude_deleted),
            ).unwrap()
            return pages.get_current_page(), pages.next_cursor

        return KeyPages(_fetch, cursor)

    def list_versions(
        self,
        key: str,
        ascending: bool = True,
        min_time: Optional[datetime] = None,
        max_time: Optional[datetime] = None,
    ) -> List[VersionInfo]:
        """Return the version history of `key`, optionally bounded in time."""
        _require_key(key)
        return self._submit(
            "list_versions",
            lambda: self._store.list_versions(key, ascending, min_time, max_time),
        ).unwrap()

    def remove_version(self, key: str, version: str) -> bool:
        """Delete one version of `key` from its history."""
        _require_key(key)

        def _remove() -> bool:
            self._store.remove_version(key, version)
            return True

        return self._submit("remove_version", _remove).unwrap()

    # Asynchronous writes

    def set(
        self,
        key: str,
        value: Any,
        user_ids: Optional[Sequence[int]] = None,
        options: Optional[Any] = None,
    ) -> AsyncResult[str]:
        """Write `value` to `key`; the result is the new version id."""
        try:
            _require_key(key)
        except ValidationError as e:
            return AsyncResult.rejected(e)
        return self._submit(
            "set", lambda: self._store.set(key, value, user_ids, options)
        )

    def increment(
        self,
        key: str,
        delta: int = 1,
        user_ids: Optional[Sequence[int]] = None,
        options: Optional[Any] = None,
    ) -> AsyncResult[int]:
        """Add the integer `delta` to the integer stored at `key`.

        A non-integer delta is rejected without contacting the backend.
        """
        try:
            _require_key(key)
            # bool is an int subclass but never a valid delta
            if isinstance(delta, bool) or not isinstance(delta, int):
                raise ValidationError(
                    f"increment delta must be an integer, got {type(delta).__name__}"
                )
        except ValidationError as e:
            return AsyncResult.rejected(e)
        return self._submit(
            "increment",
            lambda: self._store.increment(key, delta, user_ids, options),
        )

    def remove(self, key: str) -> AsyncResult[Optional[StoreEntry]]:
        """Remove `key`; the result is the entry it held before removal."""
        try:
            _require_key(key)
        except ValidationError as e:
            return AsyncResult.rejected(e)
        return self._submit("remove", lambda: self._store.remove(key))

    def update(self, key: str, transform: TransformFunction) -> AsyncResult[Any]:
        """Atomically transform the value stored at `key`.

        `transform` is handed to the backend's update entrypoint unmodified;
        the backend owns conflict detection and re-invocation. The client only
        retries the whole call when it fails.
        """
        try:
            _require_key(key)
            if not callable(transform):
                raise ValidationError("update transform must be callable")
        except ValidationError as e:
            return AsyncResult.rejected(e)
        return self._submit("update", lambda: self._store.update(key, transform))

    def on_update(self, key: str, callback: Callable[..., Any]) -> None:
        """Change notifications are not supported by this client.

        Raises:
            UnsupportedOperationError: Always
        """
        self._logger.warning("datastore_unsupported_operation", operation="on_update")
        raise UnsupportedOperationError("on_update is not supported")

    def __repr__(self) -> str:
        return f"StoreClient(name={self.handle.name!r}, scope={self.handle.scope!r})"
