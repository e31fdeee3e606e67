"""
Projection Engine — Tiered Cache
─────────────────────────────────
In-memory key -> value store. Each entry remembers when it was fetched;
freshness is decided by the caller's max_age, not by the cache.

Expired entries are never swept. They stay readable through
get_stale_or_absent() so accessors can serve the last known value when an
upstream fails. The keyspace (symbols, currency pairs, country codes) is small
and bounded, so memory stays flat in practice.

Single event loop only: there is no await inside any method, so callers on
one loop never interleave. Multi-process deployments need one cache per
worker.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

log = logging.getLogger("pe.cache")


@dataclass
class CacheEntry:
    value:      Any
    fetched_at: float


class TieredCache:

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str, max_age: float) -> Optional[Any]:
        """Return the value if it is at most max_age seconds old."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.fetched_at <= max_age:
            log.debug(f"Cache hit: {key}")
            return entry.value
        log.debug(f"Cache expired: {key}")
        return None

    def put(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, fetched_at=self.clock())

    def get_stale_or_absent(self, key: str) -> Optional[Any]:
        """Return the last stored value regardless of age."""
        entry = self._entries.get(key)
        return entry.value if entry else None

    def age(self, key: str) -> Optional[float]:
        entry = self._entries.get(key)
        return self.clock() - entry.fetched_at if entry else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
