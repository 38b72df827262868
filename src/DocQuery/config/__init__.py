from __future__ import annotations

"""Public configuration API for DocQuery."""

from DocQuery.config.api import ApiConfig
from DocQuery.config.app import (
    AppConfig,
    load_config,
    merge_config_dicts,
    parse_config_dict,
    parse_yaml,
)
from DocQuery.config.cache import CacheConfig
from DocQuery.config.repository import RepositoryConfig
from DocQuery.config.runtime import RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "ApiConfig",
    "CacheConfig",
    "RepositoryConfig",
    "AppConfig",
    "load_config",
    "parse_config_dict",
    "parse_yaml",
    "merge_config_dicts",
]
