"""Windows Event Log destination.

Purpose
-------
Write messages to the Application event log, collapsing the eight severities
onto the three native event types.

Contents
--------
* :data:`EVENT_TYPES` / :data:`EVENT_IDS` - native ``(type, id)`` mapping.
* :class:`Win32EventLogHandle` - :class:`EventLogPort` backed by pywin32.
* :class:`EventLogDestination` - singleton destination, suitable on Windows
  with pywin32 installed.

System Role
-----------
Plays the role of syslog on Windows hosts. The handle is injectable
so the mapping is testable on every platform.
"""

from __future__ import annotations

import importlib
import importlib.util
import sys
from typing import Any

from lib_log_fanout.adapters._formatting import format_eventlog_data
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.ports.structures import EventLogPort
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import DeliveryError
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import SYSTEM_SOURCE, LogMessage

#: Win32 ``EVENTLOG_*_TYPE`` constants as defined by the Event Logging API.
EVENTLOG_ERROR_TYPE = 0x0001
EVENTLOG_WARNING_TYPE = 0x0002
EVENTLOG_INFORMATION_TYPE = 0x0004

EVENT_TYPES = {
    Severity.DEBUG: EVENTLOG_INFORMATION_TYPE,
    Severity.INFO: EVENTLOG_INFORMATION_TYPE,
    Severity.NOTICE: EVENTLOG_INFORMATION_TYPE,
    Severity.WARNING: EVENTLOG_WARNING_TYPE,
    Severity.ERR: EVENTLOG_ERROR_TYPE,
    Severity.ALERT: EVENTLOG_ERROR_TYPE,
    Severity.EMERG: EVENTLOG_ERROR_TYPE,
    Severity.CRIT: EVENTLOG_ERROR_TYPE,
}

EVENT_IDS = {
    EVENTLOG_INFORMATION_TYPE: 0x01,
    EVENTLOG_WARNING_TYPE: 0x02,
    EVENTLOG_ERROR_TYPE: 0x03,
}


def to_native(level: Severity) -> tuple[int, int]:
    """Return the ``(event_type, event_id)`` pair for ``level``.

    Examples
    --------
    >>> to_native(Severity.NOTICE)
    (4, 1)
    >>> to_native(Severity.WARNING)
    (2, 2)
    >>> to_native(Severity.CRIT)
    (1, 3)
    """

    event_type = EVENT_TYPES[level]
    return event_type, EVENT_IDS[event_type]


class Win32EventLogHandle(EventLogPort):  # pragma: no cover - requires Windows
    """Registered event source obtained through ``win32evtlog``."""

    def __init__(self, source: str = SYSTEM_SOURCE) -> None:
        try:
            self._api = importlib.import_module("win32evtlog")
        except ImportError as exc:
            raise DeliveryError("win32evtlog (pywin32) is not available") from exc
        self._handle = self._api.RegisterEventSource(None, source)

    def report(self, *, source: str, event_type: int, event_id: int, data: str) -> None:
        self._api.ReportEvent(self._handle, event_type, 0, event_id, None, [data], None)

    def close(self) -> None:
        if self._handle is not None:
            self._api.DeregisterEventSource(self._handle)
            self._handle = None


class EventLogDestination(Destination):
    """Report messages to the Windows Application event log."""

    kind = "eventlog"

    def __init__(self, *, source: str = SYSTEM_SOURCE, handle: EventLogPort | None = None) -> None:
        super().__init__()
        self._source = source
        self._handle: EventLogPort | None = handle if handle is not None else Win32EventLogHandle(source)

    @classmethod
    def suitable(cls) -> bool:
        return sys.platform == "win32" and importlib.util.find_spec("win32evtlog") is not None

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "EventLogDestination":
        return cls()

    def _write(self, message: LogMessage) -> None:
        assert self._handle is not None
        event_type, event_id = to_native(message.level)
        self._handle.report(
            source=self._source,
            event_type=event_type,
            event_id=event_id,
            data=format_eventlog_data(message),
        )

    def _release(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


__all__ = [
    "EVENTLOG_ERROR_TYPE",
    "EVENTLOG_INFORMATION_TYPE",
    "EVENTLOG_WARNING_TYPE",
    "EVENT_IDS",
    "EVENT_TYPES",
    "EventLogDestination",
    "Win32EventLogHandle",
    "to_native",
]
