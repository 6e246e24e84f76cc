"""Public API for lib_log_fanout.

A message is created once and delivered to every active destination: syslog,
append-only files, Rich consoles, remote collectors, in-memory reports, and
the Windows Event Log. A failing destination never stops delivery to the
others.

Examples
--------
>>> import lib_log_fanout as fanout
>>> collected = fanout.LogCollector()
>>> fanout.init(destinations=[collected], fallback=False)
>>> _ = fanout.get("svc").warning("disk almost full")
>>> collected.texts()
['disk almost full']
>>> fanout.shutdown()
[]
"""

from __future__ import annotations

from . import __init__conf__
from .adapters.destinations import create_default_registry, register_default_destinations
from .application.ports.destination import Destination
from .application.registry import DestinationDescriptor, DestinationRegistry
from .application.router import DestinationRouter
from .application.settings import FanoutSettings
from .domain import (
    SYSTEM_SOURCE,
    AmbiguousDestinationError,
    ConfigurationError,
    DeliveryError,
    DestinationClosedError,
    DestinationError,
    DispatchReport,
    EmitOutcome,
    LogCollector,
    LogMessage,
    SerializationError,
    Severity,
    TransactionReport,
    UnknownDestinationError,
    UnsupportedDestinationError,
)
from .runtime import (
    LoggerProxy,
    RuntimeConfig,
    RuntimeSnapshot,
    activate,
    deactivate,
    dispatch,
    flush,
    get,
    init,
    inspect_runtime,
    is_initialised,
    shutdown,
)

__version__ = __init__conf__.version

__all__ = [
    "AmbiguousDestinationError",
    "ConfigurationError",
    "DeliveryError",
    "Destination",
    "DestinationClosedError",
    "DestinationDescriptor",
    "DestinationError",
    "DestinationRegistry",
    "DestinationRouter",
    "DispatchReport",
    "EmitOutcome",
    "FanoutSettings",
    "LogCollector",
    "LogMessage",
    "LoggerProxy",
    "RuntimeConfig",
    "RuntimeSnapshot",
    "SYSTEM_SOURCE",
    "SerializationError",
    "Severity",
    "TransactionReport",
    "UnknownDestinationError",
    "UnsupportedDestinationError",
    "activate",
    "create_default_registry",
    "deactivate",
    "dispatch",
    "flush",
    "get",
    "init",
    "inspect_runtime",
    "is_initialised",
    "register_default_destinations",
    "shutdown",
]
