"""Result cache contract."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ResultCache(Protocol):
    """Key/value store for raw response bodies with per-entry TTL.

    Implementations must make ``get``/``set`` atomic per key; the
    submission pipeline does no locking of its own.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored body, or None when absent or expired."""
        ...

    def set(self, key: str, body: str, ttl: int) -> None:
        """Store ``body`` under ``key`` for ``ttl`` seconds."""
        ...


class NullCache:
    """Cache capability that never stores anything."""

    enabled = False

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, body: str, ttl: int) -> None:
        return None


def is_enabled(cache: ResultCache | None) -> bool:
    """Whether a cache capability should be consulted at all."""
    return cache is not None and getattr(cache, "enabled", True)
