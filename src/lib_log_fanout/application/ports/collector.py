"""Port describing the remote log collector used by the host destination."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CollectorPort(Protocol):
    """Deliver serialised messages to a remote collector."""

    def connect(self) -> None:
        """Establish the session, raising :class:`DeliveryError` when unreachable."""

    def send(self, payload: str) -> None:
        """Send one serialised message, raising :class:`DeliveryError` on failure."""

    def close(self) -> None:
        """Release the session; safe to call repeatedly."""


__all__ = ["CollectorPort"]
