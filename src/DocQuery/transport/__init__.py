"""HTTP transport capability for DocQuery."""

from __future__ import annotations

from DocQuery.transport.http import RequestsTransport, Transport, TransportResponse

__all__ = ["Transport", "TransportResponse", "RequestsTransport"]
