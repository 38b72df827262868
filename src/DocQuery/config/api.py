"""API access configuration: credentials and transport behaviour."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from DocQuery.config.common import (
    expect_float,
    expect_int,
    expect_optional_str,
    expect_str,
    get_section,
    get_value,
)
from DocQuery.transport.http import DEFAULT_MAX_ATTEMPTS, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Store validated API access settings.

    The access token itself is never written in the config file; only the
    name of the environment variable holding it.
    """

    access_token_env: Optional[str] = "DOCQUERY_ACCESS_TOKEN"
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    user_agent: str = DEFAULT_USER_AGENT

    def access_token(self) -> Optional[str]:
        """Read the access token from the environment, if configured."""
        if not self.access_token_env:
            return None
        return os.getenv(self.access_token_env) or None


def load_api(raw: Mapping[str, Any]) -> ApiConfig:
    """Load the ``api`` section; every key is optional."""
    section = get_section(raw, "api", required=False)
    defaults = ApiConfig()
    return ApiConfig(
        access_token_env=expect_optional_str(
            get_value(section, "access_token_env", "api.access_token_env", defaults.access_token_env),
            "api.access_token_env",
        ),
        timeout=expect_float(get_value(section, "timeout", "api.timeout", defaults.timeout), "api.timeout"),
        max_attempts=expect_int(
            get_value(section, "max_attempts", "api.max_attempts", defaults.max_attempts),
            "api.max_attempts",
        ),
        user_agent=expect_str(
            get_value(section, "user_agent", "api.user_agent", defaults.user_agent),
            "api.user_agent",
        ),
    )


def check_api(config: ApiConfig) -> None:
    """Validate API domain constraints.

    Raises:
        ValueError: If values violate API constraints.
    """
    if config.timeout <= 0:
        raise ValueError("api.timeout must be positive")
    if config.max_attempts < 1:
        raise ValueError("api.max_attempts must be >= 1")
    if not config.user_agent.strip():
        raise ValueError("api.user_agent must not be empty")
