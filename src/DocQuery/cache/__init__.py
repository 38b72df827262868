"""Result cache capabilities for DocQuery.

Provides the cache contract, a null implementation, an in-memory LRU cache
and a SQLite-backed cache.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from DocQuery.cache.base import NullCache, ResultCache, is_enabled
from DocQuery.cache.memory import LruCache
from DocQuery.cache.sqlite import SqliteCache
from DocQuery.utils.log import log

if TYPE_CHECKING:
    from DocQuery.config import CacheConfig


def create_cache(config: CacheConfig) -> ResultCache:
    """Create the result cache described by the configuration.

    Args:
        config: Cache configuration section.

    Returns:
        A `NullCache` when caching is disabled, otherwise the configured backend.
    """
    if not config.enabled:
        log.debug("Result cache disabled")
        return NullCache()
    if config.backend == "sqlite":
        log.info("SQLite result cache enabled: %s", config.db_path)
        return SqliteCache(Path(config.db_path))
    log.debug("In-memory result cache enabled: max_entries=%d", config.max_entries)
    return LruCache(max_size=config.max_entries)


__all__ = [
    "ResultCache",
    "NullCache",
    "LruCache",
    "SqliteCache",
    "is_enabled",
    "create_cache",
]
