"""Ports for operating-system log backends (syslog, Windows event log)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SyslogPort(Protocol):
    """Subset of the stdlib :mod:`syslog` module used by the syslog destination.

    Facility and priority constants (``LOG_DAEMON``, ``LOG_ERR`` ...) are read
    from the backend object by name.
    """

    def openlog(self, ident: str, logoption: int, facility: int) -> None: ...

    def syslog(self, priority: int, message: str) -> None: ...

    def closelog(self) -> None: ...


@runtime_checkable
class EventLogPort(Protocol):
    """Open handle to the operating-system event log."""

    def report(self, *, source: str, event_type: int, event_id: int, data: str) -> None:
        """Write one event record."""

    def close(self) -> None:
        """Deregister the event source."""


__all__ = ["EventLogPort", "SyslogPort"]
