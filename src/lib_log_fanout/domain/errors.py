"""Exception hierarchy for destination configuration and delivery."""

from __future__ import annotations


class DestinationError(Exception):
    """Root of every error raised by the fan-out layer."""


class ConfigurationError(DestinationError, ValueError):
    """A destination cannot be configured (bad facility, bad target, ...)."""


class UnknownDestinationError(ConfigurationError):
    """No registered destination kind recognizes the requested kind or target."""


class UnsupportedDestinationError(ConfigurationError):
    """The named kind exists but cannot run in the current environment."""


class AmbiguousDestinationError(ConfigurationError):
    """Several kinds with the same priority claim one target."""


class DeliveryError(DestinationError):
    """A backend rejected or failed to accept a write."""


class SerializationError(DestinationError):
    """A message could not be encoded for a specific backend."""


class DestinationClosedError(DestinationError):
    """An emit reached a destination after it was closed."""


__all__ = [
    "AmbiguousDestinationError",
    "ConfigurationError",
    "DeliveryError",
    "DestinationClosedError",
    "DestinationError",
    "SerializationError",
    "UnknownDestinationError",
    "UnsupportedDestinationError",
]
