"""Process-local TTL cache for resolved hadith data."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from .models import CacheEntry

LOGGER = logging.getLogger(__name__)

ONE_HOUR = 3600.0
TWO_HOURS = 7200.0
ONE_DAY = 86400.0


class TTLCache:
    """Key/value map whose entries stop being served after ``ttl_seconds``.

    Stale entries are bypassed rather than evicted and get overwritten on the
    next ``set``. There is no capacity bound: keys are built from
    (collection x source mode), a small fixed space. There is no locking
    either, so two concurrent misses on the same key will both fetch and the
    last ``set`` wins.
    """

    def __init__(self, ttl_seconds: float = ONE_HOUR, clock: Callable[[], float] = time.time) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds!r}")
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, CacheEntry[Any]] = {}

    def _is_fresh(self, entry: CacheEntry[Any]) -> bool:
        return self._clock() - entry.timestamp < self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            LOGGER.debug("Cache miss for %s", key)
            return None
        if not self._is_fresh(entry):
            LOGGER.debug("Cache entry for %s is stale", key)
            return None
        LOGGER.debug("Cache hit for %s", key)
        return entry.data

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(key=key, data=data, timestamp=self._clock())

    def entry(self, key: str) -> Optional[CacheEntry[Any]]:
        """Return the raw entry, fresh or stale."""
        return self._entries.get(key)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key) if isinstance(key, str) else None
        return entry is not None and self._is_fresh(entry)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["TTLCache", "ONE_HOUR", "TWO_HOURS", "ONE_DAY"]
