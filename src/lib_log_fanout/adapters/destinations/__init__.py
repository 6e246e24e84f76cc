"""Concrete destination kinds and their default registration.

:func:`register_default_destinations` is the single place where the built-in
kinds enter a :class:`~lib_log_fanout.application.registry.DestinationRegistry`.
Every implicit matcher below claims a disjoint set of targets, so all kinds
share the default priority.
"""

from __future__ import annotations

from lib_log_fanout.adapters.console import ConsoleDestination, PrototypeConsoleDestination
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.registry import DestinationRegistry

from .collectors import ArrayDestination, ReportDestination
from .eventlog import EventLogDestination
from .file import FileDestination
from .host import HostDestination
from .syslog import SyslogDestination

DEFAULT_DESTINATION_TYPES: tuple[type[Destination], ...] = (
    SyslogDestination,
    FileDestination,
    ConsoleDestination,
    PrototypeConsoleDestination,
    HostDestination,
    ReportDestination,
    ArrayDestination,
    EventLogDestination,
)


def register_default_destinations(registry: DestinationRegistry) -> DestinationRegistry:
    """Register every built-in kind on ``registry`` and return it."""

    for destination_type in DEFAULT_DESTINATION_TYPES:
        registry.register_type(destination_type)
    return registry


def create_default_registry() -> DestinationRegistry:
    """Return a fresh registry populated with the built-in kinds.

    Examples
    --------
    >>> create_default_registry().kinds()[:3]
    ['syslog', 'file', 'console']
    """

    return register_default_destinations(DestinationRegistry())


__all__ = [
    "ArrayDestination",
    "ConsoleDestination",
    "DEFAULT_DESTINATION_TYPES",
    "EventLogDestination",
    "FileDestination",
    "HostDestination",
    "PrototypeConsoleDestination",
    "ReportDestination",
    "SyslogDestination",
    "create_default_registry",
    "register_default_destinations",
]
