from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from DocQuery.config.api import ApiConfig, check_api, load_api
from DocQuery.config.cache import CacheConfig, check_cache, load_cache
from DocQuery.config.repository import RepositoryConfig, check_repository, load_repository
from DocQuery.config.runtime import RuntimeConfig, check_runtime, load_runtime


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    api: ApiConfig
    cache: CacheConfig
    repository: RepositoryConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse and validate a normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    api = load_api(raw)
    cache = load_cache(raw)
    repository = load_repository(raw)

    check_runtime(runtime)
    check_api(api)
    check_cache(cache)
    check_repository(repository)

    return AppConfig(runtime=runtime, api=api, cache=cache, repository=repository)


def load_config(path: Path, override_path: Optional[Path] = None) -> AppConfig:
    """Load a YAML config file, deep-merged with an optional override file."""
    raw = parse_yaml(path.read_text(encoding="utf-8"))
    if override_path is not None and override_path != path:
        override = parse_yaml(override_path.read_text(encoding="utf-8"))
        raw = merge_config_dicts(raw, override)
    return parse_config_dict(raw)


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings; override wins on scalar conflicts."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
