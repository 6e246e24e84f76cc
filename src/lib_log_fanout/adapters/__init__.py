"""Adapters binding the fan-out core to concrete backends."""

from __future__ import annotations

from .console import ConsoleDestination, PrototypeConsoleDestination
from .destinations import (
    ArrayDestination,
    EventLogDestination,
    FileDestination,
    HostDestination,
    ReportDestination,
    SyslogDestination,
    create_default_registry,
    register_default_destinations,
)
from .identity import SocketHostIdentity, StaticHostIdentity
from .network import TcpCollectorClient

__all__ = [
    "ArrayDestination",
    "ConsoleDestination",
    "EventLogDestination",
    "FileDestination",
    "HostDestination",
    "PrototypeConsoleDestination",
    "ReportDestination",
    "SocketHostIdentity",
    "StaticHostIdentity",
    "SyslogDestination",
    "TcpCollectorClient",
    "create_default_registry",
    "register_default_destinations",
]
