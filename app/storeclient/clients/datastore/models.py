"""Value types returned by data store operations.

Reads return `StoreEntry` or `None`. `None` always means the key (or the
version) is absent, so stored falsy values such as `0`, `False` or `""` are
never mistaken for a missing key.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from storeclient.exceptions import ValidationError

# A page fetcher takes a cursor (None for the first page) and returns the
# keys on that page plus the cursor of the next page (None when finished).
PageFetcher = Callable[[Optional[str]], Tuple[List[str], Optional[str]]]


@dataclass(frozen=True)
class KeyInfo:
    """Metadata the backend keeps for one version of a key."""

    version: str
    created_time: datetime
    updated_time: datetime
    user_ids: Tuple[int, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StoreEntry:
    """A stored value together with its key info."""

    key: str
    value: Any
    info: KeyInfo

    @property
    def version(self) -> str:
        return self.info.version


@dataclass(frozen=True)
class VersionInfo:
    """One entry of a key's version history."""

    version: str
    created_time: datetime
    deleted: bool = False


class KeyPages:
    """Cursor-based handle over a paginated key listing.

    The first page is fetched on construction. Later pages are fetched on
    `advance_to_next_page()`, or lazily while iterating.

    Args:
        fetch_page: Callable returning `(keys, next_cursor)` for a cursor
        cursor: Cursor to start from; None starts at the beginning

    Example:
        pages = client.list_keys(prefix="player_")
        while True:
            for key in pages.get_current_page():
                ...
            if pages.is_finished:
                break
            pages.advance_to_next_page()
    """

    def __init__(self, fetch_page: PageFetcher, cursor: Optional[str] = None) -> None:
        self._fetch_page = fetch_page
        self._current: List[str] = []
        self._next_cursor: Optional[str] = None
        self.cursor = cursor
        self.is_finished = False
        self._load(cursor)

    def _load(self, cursor: Optional[str]) -> None:
        keys, next_cursor = self._fetch_page(cursor)
        self.cursor = cursor
        self._current = list(keys)
        self._next_cursor = next_cursor
        self.is_finished = next_cursor is None

    def get_current_page(self) -> List[str]:
        return list(self._current)

    @property
    def next_cursor(self) -> Optional[str]:
        """Cursor that resumes the listing after the current page."""
        return self._next_cursor

    def advance_to_next_page(self) -> None:
        """Fetch the next page.

        Raises:
            ValidationError: The listing has no further pages
        """
        if self.is_finished:
            raise ValidationError("key listing is finished")
        self._load(self._next_cursor)

    def __iter__(self) -> Iterator[str]:
        while True:
            yield from self.get_current_page()
            if self.is_finished:
                return
            self.advance_to_next_page()
