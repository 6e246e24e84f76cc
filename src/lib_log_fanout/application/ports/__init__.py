"""Ports describing the boundaries between the fan-out core and its backends."""

from __future__ import annotations

from .collector import CollectorPort
from .destination import Destination, target_key
from .identity import HostIdentityPort
from .report import ReportPort
from .structures import EventLogPort, SyslogPort
from .time import ClockPort

__all__ = [
    "ClockPort",
    "CollectorPort",
    "Destination",
    "EventLogPort",
    "HostIdentityPort",
    "ReportPort",
    "SyslogPort",
    "target_key",
]
