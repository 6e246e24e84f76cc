"""Domain entities and value objects used by the fan-out layer."""

from __future__ import annotations

from .collector import LogCollector
from .errors import (
    AmbiguousDestinationError,
    ConfigurationError,
    DeliveryError,
    DestinationClosedError,
    DestinationError,
    SerializationError,
    UnknownDestinationError,
    UnsupportedDestinationError,
)
from .levels import Severity, SeverityClass
from .message import SYSTEM_SOURCE, LogMessage
from .outcome import DispatchReport, EmitOutcome, Identity
from .report import TransactionReport

__all__ = [
    "AmbiguousDestinationError",
    "ConfigurationError",
    "DeliveryError",
    "DestinationClosedError",
    "DestinationError",
    "DispatchReport",
    "EmitOutcome",
    "Identity",
    "LogCollector",
    "LogMessage",
    "SYSTEM_SOURCE",
    "SerializationError",
    "Severity",
    "SeverityClass",
    "TransactionReport",
    "UnknownDestinationError",
    "UnsupportedDestinationError",
]
