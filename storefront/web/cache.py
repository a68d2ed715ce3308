"""
In-process data cache with tag and path invalidation.

Entries are keyed by request (endpoint + params); each entry records the
cache tags it was fetched under and the page path that rendered it, so a
revalidation webhook can evict by either.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Set

DEFAULT_MAX_ENTRIES = 1000


@dataclass
class CacheEntry:
    value: Any
    tags: Set[str] = field(default_factory=set)
    paths: Set[str] = field(default_factory=set)
    stored_at: float = 0.0


def normalize_path(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return path if path.startswith("/") else f"/{path}"


class TaggedCache:
    """Thread-safe LRU cache invalidated by tag or page path."""

    def __init__(
        self,
        ttl: Optional[float] = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            ttl: Optional max age in seconds; None keeps entries until revalidated
            max_entries: Least recently used entries are dropped past this size
        """
        self.ttl = ttl
        self.max_entries = max_entries
        self.clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        # bumped by every eviction request
        self._generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Any],
        tags: Iterable[str] = (),
        path: Optional[str] = None
    ) -> Any:
        """
        Return the cached value for key, calling fetch() on a miss.

        Exceptions from fetch() propagate and nothing is cached. A None
        result is returned but not stored. A result is also dropped when a
        revalidation ran while fetch() was in flight, since it may predate
        the change that triggered it.
        """
        path = normalize_path(path)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if not self._expired(entry):
                    self._entries.move_to_end(key)
                    if path:
                        entry.paths.add(path)
                    return entry.value
                del self._entries[key]
            generation = self._generation

        value = fetch()
        if value is None:
            return value

        with self._lock:
            if generation != self._generation:
                return value
            self._entries[key] = CacheEntry(
                value=value,
                tags=set(tags),
                paths={path} if path else set(),
                stored_at=self.clock()
            )
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return value

    def _expired(self, entry: CacheEntry) -> bool:
        return self.ttl is not None and self.clock() - entry.stored_at > self.ttl

    def revalidate_tag(self, tag: str) -> int:
        """Evict every entry fetched under tag. Returns the eviction count."""
        with self._lock:
            self._generation += 1
            keys = [key for key, entry in self._entries.items() if tag in entry.tags]
            for key in keys:
                del self._entries[key]
        return len(keys)

    def revalidate_path(self, path: str) -> int:
        """Evict every entry rendered for path. Returns the eviction count."""
        path = normalize_path(path)
        with self._lock:
            self._generation += 1
            keys = [key for key, entry in self._entries.items() if path in entry.paths]
            for key in keys:
                del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()
