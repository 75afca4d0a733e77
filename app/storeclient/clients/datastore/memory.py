"""In-memory data store backend.

A process-local stand-in for the remote service, used for development and
tests. It models the service behavior the client relies on:

- every write appends a version; `remove` appends a tombstone, so removed
  values stay readable through `get_version`
- `update` is optimistic: the transform runs outside the lock and is
  re-invoked when another writer committed in between
- `list_keys` pages through keys with an opaque cursor

Values are deep-copied on the way in and out. `None` cannot be stored,
since reads use it to mean "absent".
"""

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from storeclient.clients.datastore.models import (
    KeyInfo,
    KeyPages,
    StoreEntry,
    VersionInfo,
)
from storeclient.clients.datastore.protocols import TransformFunction
from storeclient.exceptions import TransientBackendError, ValidationError
from storeclient.logging import get_module_logger

logger = get_module_logger()

Clock = Callable[[], datetime]

# Conflicting writers are expected to settle long before this
MAX_UPDATE_ROUNDS = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Record:
    version: str
    value: Any
    created_time: datetime
    deleted: bool = False
    user_ids: Tuple[int, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)


class InMemoryDataStore:
    """One named store within a scope, held in memory.

    Args:
        name: Store name
        scope: Store scope
        clock: Callable returning the current time, injectable for tests
    """

    def __init__(self, name: str, scope: str, clock: Clock = _utcnow) -> None:
        self.name = name
        self.scope = scope
        self._clock = clock
        self._lock = RLock()
        self._history: Dict[str, List[_Record]] = {}
        self._created: Dict[str, datetime] = {}

    def _latest(self, key: str) -> Optional[_Record]:
        records = self._history.get(key)
        return records[-1] if records else None

    def _entry(self, key: str, record: Optional[_Record]) -> Optional[StoreEntry]:
        if record is None or record.deleted:
            return None
        info = KeyInfo(
            version=record.version,
            created_time=self._created[key],
            updated_time=record.created_time,
            user_ids=record.user_ids,
            metadata=dict(record.metadata),
        )
        return StoreEntry(key=key, value=copy.deepcopy(record.value), info=info)

    def _append(
        self,
        key: str,
        value: Any,
        user_ids: Optional[Sequence[int]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        deleted: bool = False,
    ) -> _Record:
        now = self._clock()
        latest = self._latest(key)
        if latest is None or latest.deleted:
            self._created[key] = now
        record = _Record(
            version=uuid.uuid4().hex,
            value=copy.deepcopy(value),
            created_time=now,
            deleted=deleted,
            user_ids=tuple(user_ids or ()),
            metadata=dict(metadata or {}),
        )
        self._history.setdefault(key, []).append(record)
        return record

    def get(self, key: str, options: Optional[Any] = None) -> Optional[StoreEntry]:
        with self._lock:
            return self._entry(key, self._latest(key))

    def set(
        self,
        key: str,
        value: Any,
        user_ids: Optional[Sequence[int]] = None,
        options: Optional[Any] = None,
    ) -> str:
        if value is None:
            raise ValidationError("cannot store None; use remove() instead")
        metadata = options.get("metadata") if isinstance(options, dict) else None
        with self._lock:
            return self._append(key, value, user_ids, metadata).version

    def update(self, key: str, transform: TransformFunction) -> Any:
        for _ in range(MAX_UPDATE_ROUNDS):
            with self._lock:
                latest = self._latest(key)
                seen_version = latest.version if latest else None
                current = self.get(key)
            new_value = transform(current.value if current else None)
            if new_value is None:
                return None
            with self._lock:
                latest = self._latest(key)
                if (latest.version if latest else None) != seen_version:
                    logger.debug("memory_store_update_conflict", key=key)
                    continue
                user_ids = latest.user_ids if latest and not latest.deleted else ()
                self._append(key, new_value, user_ids)
                return copy.deepcopy(new_value)
        raise TransientBackendError(f"update of {key!r} kept conflicting")

    def increment(
        self,
        key: str,
        delta: int = 1,
        user_ids: Optional[Sequence[int]] = None,
        options: Optional[Any] = None,
    ) -> int:
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise ValidationError(
                f"increment delta must be an integer, got {type(delta).__name__}"
            )
        with self._lock:
            current = self.get(key)
            value = current.value if current else 0
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(
                    f"cannot increment {key!r}: stored value is "
                    f"{type(value).__name__}, not an integer"
                )
            new_value = value + delta
            self._append(key, new_value, user_ids)
            return new_value

    def remove(self, key: str) -> Optional[StoreEntry]:
        with self._lock:
            previous = self.get(key)
            if previous is None:
                return None
            self._append(key, None, deleted=True)
            return previous

    def get_version(self, key: str, version: str) -> Optional[StoreEntry]:
        with self._lock:
            for record in self._history.get(key, []):
                if record.version == version:
                    return self._entry(key, record)
            return None

    def get_version_at_time(
        self, key: str, timestamp: datetime
    ) -> Optional[StoreEntry]:
        with self._lock:
            found: Optional[_Record] = None
            for record in self._history.get(key, []):
                if record.created_time > timestamp:
                    break
                found = record
            return self._entry(key, found)

    def remove_version(self, key: str, version: str) -> None:
        with self._lock:
            records = self._history.get(key, [])
            if records and records[-1].version == version:
                raise ValidationError("cannot remove the current version of a key")
            self._history[key] = [r for r in records if r.version != version]

    def list_keys(
        self,
        prefix: str = "",
        page_size: int = 50,
        cursor: Optional[str] = None,
        exclude_deleted: bool = False,
    ) -> KeyPages:
        if page_size < 1:
            raise ValidationError("page_size must be at least 1")

        def _fetch(after: Optional[str]) -> Tuple[List[str], Optional[str]]:
            with self._lock:
                keys = sorted(
                    key
                    for key, records in self._history.items()
                    if key.startswith(prefix)
                    and records
                    and not (exclude_deleted and records[-1].deleted)
                )
            if after is not None:
                keys = [key for key in keys if key > after]
            page = keys[:page_size]
            next_cursor = page[-1] if len(keys) > page_size else None
            return page, next_cursor

        return KeyPages(_fetch, cursor)

    def list_versions(
        self,
        key: str,
        ascending: bool = True,
        min_time: Optional[datetime] = None,
        max_time: Optional[datetime] = None,
    ) -> List[VersionInfo]:
        with self._lock:
            versions = [
                VersionInfo(r.version, r.created_time, r.deleted)
                for r in self._history.get(key, [])
                if (min_time is None or r.created_time >= min_time)
                and (max_time is None or r.created_time <= max_time)
            ]
        return versions if ascending else list(reversed(versions))


class InMemoryBackend:
    """Backend opening in-memory stores.

    Stores are kept per (name, scope), so independent clients opened with the
    same name and scope see the same data.

    Args:
        reachable: Value reported by `check_access()`
        clock: Clock handed to every opened store
    """

    def __init__(self, reachable: bool = True, clock: Clock = _utcnow) -> None:
        self.reachable = reachable
        self._clock = clock
        self._stores: Dict[Tuple[str, str], InMemoryDataStore] = {}
        self._lock = RLock()

    def open_store(
        self, name: str, scope: str, options: Optional[Any] = None
    ) -> InMemoryDataStore:
        with self._lock:
            store = self._stores.get((name, scope))
            if store is None:
                store = InMemoryDataStore(name, scope, clock=self._clock)
                self._stores[(name, scope)] = store
            return store

    def check_access(self) -> bool:
        return self.reachable
