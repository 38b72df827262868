"""Factory functions for CLI component creation.

Centralizes how configuration turns into an `Api` with its transport and
cache, so commands stay free of wiring code.
"""

from __future__ import annotations

from DocQuery.api import Api
from DocQuery.cache import create_cache
from DocQuery.config import AppConfig
from DocQuery.transport.http import RequestsTransport
from DocQuery.utils.log import log


def create_transport(config: AppConfig) -> RequestsTransport:
    return RequestsTransport(
        timeout=config.api.timeout,
        max_attempts=config.api.max_attempts,
        user_agent=config.api.user_agent,
    )


def create_api(config: AppConfig) -> Api:
    """Create an Api from configuration.

    Args:
        config: Application configuration.

    Returns:
        Api owning a fresh transport and the configured cache.
    """
    access_token = config.api.access_token()
    if config.api.access_token_env and not access_token:
        log.debug("No access token found in $%s, querying anonymously", config.api.access_token_env)
    return Api(
        config.repository.forms,
        config.repository.refs,
        access_token=access_token,
        transport=create_transport(config),
        cache=create_cache(config.cache),
    )
