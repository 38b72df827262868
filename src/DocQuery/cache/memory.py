"""In-memory LRU cache with per-entry expiry."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Optional

from DocQuery.utils.log import log

DEFAULT_MAX_SIZE = 100


class LruCache:
    """Bounded, thread-safe LRU cache.

    Entries expire ``ttl`` seconds after being set. Expired entries are
    dropped on read; the least recently used entry is evicted when the cache
    is full.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, tuple[str, float]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            body, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return body

    def set(self, key: str, body: str, ttl: int) -> None:
        if ttl <= 0:
            return
        with self._lock:
            self._entries[key] = (body, self._clock() + ttl)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("LRU cache evicted key=%s", evicted)

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
