"""HTTP transport capability.

The submission pipeline only needs a ``get(url, params, headers)`` call
returning status, body and headers. `RequestsTransport` is the default
implementation; tests and host applications can plug in their own.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Sequence, Union

import requests
from requests.structures import CaseInsensitiveDict

from DocQuery.utils.log import log

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_ATTEMPTS = 1
BASE_PAUSE = 0.5
MAX_SLEEP = 8.0

DEFAULT_USER_AGENT = "doc-query/0.1"

QueryParams = Mapping[str, Union[str, Sequence[str]]]


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Status, body text and case-insensitive headers of one HTTP exchange."""

    status: int
    body: str
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            object.__setattr__(self, "headers", CaseInsensitiveDict(self.headers))

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name) or default


class Transport(Protocol):
    """Pluggable GET capability."""

    def get(self, url: str, params: QueryParams, headers: Mapping[str, str]) -> TransportResponse:
        ...


class RequestsTransport:
    """Transport built on a reusable ``requests.Session``.

    Connection errors and timeouts are retried with exponential backoff up to
    ``max_attempts``. HTTP error statuses are returned as-is: interpreting them
    belongs to the caller.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: Per-request timeout in seconds.
            max_attempts: Attempts for connection-level failures (>= 1).
            user_agent: User-Agent header sent with every request.
            session: Optional pre-configured session (proxies, adapters...).
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = user_agent

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections."""
        self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get(self, url: str, params: QueryParams, headers: Mapping[str, str]) -> TransportResponse:
        """Issue a GET request.

        Args:
            url: Endpoint URL.
            params: Query parameters; sequence values are sent as repeated keys.
            headers: Extra request headers.

        Returns:
            The response status, text body and headers.

        Raises:
            requests.RequestException: Last connection error once attempts
                are exhausted.
        """
        last_err: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                log.debug("GET %s attempt %d/%d", url, attempt, self.max_attempts)
                resp = self._session.get(url, params=params, headers=dict(headers), timeout=self.timeout)
                log.debug("GET %s -> status=%s bytes=%s", url, resp.status_code, len(resp.content))
                return TransportResponse(status=resp.status_code, body=resp.text, headers=resp.headers)
            except (requests.Timeout, requests.ConnectionError) as e:
                last_err = e
                if attempt < self.max_attempts:
                    delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
                    log.debug("GET %s retry in %.2fs (error=%s)", url, delay, e)
                    time.sleep(delay)

        assert last_err is not None
        raise last_err
