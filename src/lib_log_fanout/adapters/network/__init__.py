"""Network transports used by remote destinations."""

from __future__ import annotations

from .collector_client import DEFAULT_PORT, TcpCollectorClient, parse_endpoint

__all__ = ["DEFAULT_PORT", "TcpCollectorClient", "parse_endpoint"]
