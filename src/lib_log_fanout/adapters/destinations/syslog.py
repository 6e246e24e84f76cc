"""Syslog destination backed by the stdlib :mod:`syslog` module.

Purpose
-------
Forward messages to the local syslog daemon at the priority matching their
severity, under a configurable facility and program identity.

Contents
--------
* :func:`syslog_ident` - derive the program identity from the process name.
* :class:`SyslogDestination` - singleton :class:`Destination` implementation.

System Role
-----------
Only suitable where the :mod:`syslog` module exists (POSIX). The backend
module is injectable so tests can record calls without a daemon.
"""

from __future__ import annotations

import importlib
import importlib.util
from typing import Any

from lib_log_fanout.adapters._formatting import format_syslog_line
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.ports.structures import SyslogPort
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import ConfigurationError
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import LogMessage

_IDENT_PREFIX = "puppet"

_FACILITIES = frozenset(
    ("kern", "user", "mail", "daemon", "auth", "syslog", "lpr", "news", "uucp", "cron", "authpriv")
    + tuple(f"local{index}" for index in range(8))
)


def syslog_ident(process_name: str) -> str:
    """Return the syslog identity for ``process_name``.

    Examples
    --------
    >>> syslog_ident("agent")
    'puppet-agent'
    >>> syslog_ident("puppetd")
    'puppetd'
    """

    if _IDENT_PREFIX in process_name:
        return process_name
    return f"{_IDENT_PREFIX}-{process_name}"


def _default_backend() -> SyslogPort:  # pragma: no cover - depends on platform
    return importlib.import_module("syslog")  # type: ignore[return-value]


def _native_constant(backend: Any, name: str) -> int | None:
    value = getattr(backend, name, None)
    return value if isinstance(value, int) else None


class SyslogDestination(Destination):
    """Emit messages through ``syslog.syslog`` at the mapped priority."""

    kind = "syslog"

    def __init__(
        self,
        *,
        ident: str,
        facility: str = "daemon",
        backend: SyslogPort | None = None,
    ) -> None:
        super().__init__()
        self._backend = backend if backend is not None else _default_backend()
        name = facility.strip().lower()
        facility_code = _native_constant(self._backend, f"LOG_{name.upper()}") if name in _FACILITIES else None
        if facility_code is None:
            raise ConfigurationError(f"Invalid syslog facility {facility}")
        self._facility = facility_code
        self._ident = ident
        options = (_native_constant(self._backend, "LOG_PID") or 0) | (_native_constant(self._backend, "LOG_NDELAY") or 0)
        # A previous session (ours or the host's) would keep the old identity.
        self._backend.closelog()
        self._backend.openlog(ident, options, facility_code)

    @classmethod
    def suitable(cls) -> bool:
        return importlib.util.find_spec("syslog") is not None

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "SyslogDestination":
        return cls(ident=syslog_ident(settings.process_name), facility=settings.syslog_facility)

    @property
    def ident(self) -> str:
        return self._ident

    @property
    def facility(self) -> int:
        return self._facility

    def priority_for(self, level: Severity) -> int:
        """Return the native priority constant for ``level`` (``LOG_ERR`` ...)."""

        priority = _native_constant(self._backend, f"LOG_{level.severity.upper()}")
        if priority is None:
            raise ConfigurationError(f"syslog backend has no priority for level {level.severity!r}")
        return priority

    def _write(self, message: LogMessage) -> None:
        self._backend.syslog(self.priority_for(message.level), format_syslog_line(message))

    def _release(self) -> None:
        self._backend.closelog()


__all__ = ["SyslogDestination", "syslog_ident"]
