from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..errors import StorageError
from .backends import CacheBackend, CacheEntry

logger = logging.getLogger(__name__)


class CacheStore:
    """
    Size-bounded cache of rendered images, trimmed by recency of access.

    Eviction keeps the longest run of most-recently-accessed entries whose
    combined size fits the budget and deletes everything after it. The
    entry that was just written is not exempt: if it alone overflows the
    budget together with the entries accessed at the same time or later,
    it is deleted too.
    """

    def __init__(self, backend: CacheBackend, size_budget: int) -> None:
        self.backend = backend
        self.size_budget = int(size_budget)

    def lookup(self, key: str) -> Optional[Tuple[bytes, float]]:
        """Return ``(bytes, last_modified)`` and mark the entry accessed."""
        hit = self.backend.get(key)
        if hit is None:
            logger.debug("cache miss %s", key, extra={"event": "cache_miss"})
            return None
        self.touch(key)
        logger.debug("cache hit %s", key, extra={"event": "cache_hit"})
        return hit

    def last_modified(self, key: str) -> Optional[float]:
        """Modification time of an entry without reading its bytes."""
        entry = self.backend.stat(key)
        return None if entry is None else entry.last_modified

    def touch(self, key: str) -> None:
        self.backend.touch(key)

    def store(self, key: str, data: bytes) -> List[str]:
        """Write an entry, then evict. Returns the evicted keys."""
        self.backend.put(key, data)
        return self.evict()

    def entries(self) -> List[CacheEntry]:
        return self.backend.list_entries()

    def total_size(self) -> int:
        return sum(e.size for e in self.entries())

    def evict(self) -> List[str]:
        entries = sorted(self.entries(), key=lambda e: e.last_access, reverse=True)

        evicted = []
        cumulative = 0
        for entry in entries:
            cumulative += entry.size
            if cumulative <= self.size_budget:
                continue
            if self._discard(entry.key):
                evicted.append(entry.key)

        if evicted:
            logger.info(
                "evicted %d cache entries (budget %d bytes)",
                len(evicted),
                self.size_budget,
                extra={"event": "cache_evicted"},
            )
        return evicted

    def clear(self) -> int:
        removed = 0
        for entry in self.entries():
            if self._discard(entry.key):
                removed += 1
        return removed

    def _discard(self, key: str) -> bool:
        try:
            return self.backend.delete(key)
        except StorageError as exc:
            # another process may own or have removed the entry
            logger.debug(
                "ignoring failed delete of %s: %s", key, exc, extra={"event": "cache_delete_failed"}
            )
            return False
