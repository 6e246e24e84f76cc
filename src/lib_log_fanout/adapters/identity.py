"""Hostname and domain lookup backed by :mod:`socket`."""

from __future__ import annotations

import socket

from lib_log_fanout.application.ports.identity import HostIdentityPort


class SocketHostIdentity(HostIdentityPort):
    """Resolve the short host name and DNS domain of the local machine."""

    def hostname(self) -> str:
        return socket.gethostname().split(".", 1)[0]

    def domain(self) -> str | None:
        fqdn = socket.getfqdn()
        if "." not in fqdn:
            return None
        _, _, domain = fqdn.partition(".")
        return domain or None


class StaticHostIdentity(HostIdentityPort):
    """Fixed identity for hosts configured explicitly (and for tests)."""

    def __init__(self, hostname: str, domain: str | None = None) -> None:
        self._hostname = hostname
        self._domain = domain

    def hostname(self) -> str:
        return self._hostname

    def domain(self) -> str | None:
        return self._domain


__all__ = ["SocketHostIdentity", "StaticHostIdentity"]
