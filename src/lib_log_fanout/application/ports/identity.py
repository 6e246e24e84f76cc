"""Port for hostname/domain lookups used to stamp forwarded messages."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class HostIdentityPort(Protocol):
    """Resolve the local host name and DNS domain."""

    def hostname(self) -> str:
        """Return the short host name."""

    def domain(self) -> str | None:
        """Return the DNS domain, or ``None`` when unknown."""


__all__ = ["HostIdentityPort"]
