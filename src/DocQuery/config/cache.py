"""Result cache configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from DocQuery.cache.memory import DEFAULT_MAX_SIZE
from DocQuery.config.common import expect_bool, expect_int, expect_str, get_section, get_value

_ALLOWED_BACKENDS = {"memory", "sqlite"}


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Cache configuration."""

    enabled: bool = True
    backend: str = "memory"
    max_entries: int = DEFAULT_MAX_SIZE
    db_path: str = "cache/responses.db"


def load_cache(raw: Mapping[str, Any]) -> CacheConfig:
    """Load the ``cache`` section; every key is optional."""
    section = get_section(raw, "cache", required=False)
    defaults = CacheConfig()
    return CacheConfig(
        enabled=expect_bool(get_value(section, "enabled", "cache.enabled", defaults.enabled), "cache.enabled"),
        backend=expect_str(get_value(section, "backend", "cache.backend", defaults.backend), "cache.backend")
        .strip()
        .lower(),
        max_entries=expect_int(
            get_value(section, "max_entries", "cache.max_entries", defaults.max_entries),
            "cache.max_entries",
        ),
        db_path=expect_str(get_value(section, "db_path", "cache.db_path", defaults.db_path), "cache.db_path"),
    )


def check_cache(config: CacheConfig) -> None:
    """Validate cache domain constraints.

    Raises:
        ValueError: If values violate cache constraints.
    """
    if config.backend not in _ALLOWED_BACKENDS:
        raise ValueError(f"cache.backend must be one of {sorted(_ALLOWED_BACKENDS)}")
    if config.max_entries <= 0:
        raise ValueError("cache.max_entries must be positive")
    if config.enabled and config.backend == "sqlite" and not config.db_path.strip():
        raise ValueError("cache.db_path must not be empty when cache.backend=sqlite")
