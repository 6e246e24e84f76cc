"""Resolved configuration values consumed by destinations.

The surrounding configuration system owns where these values come from; the
fan-out layer only reads the frozen result. See
:func:`lib_log_fanout.runtime._settings.build_runtime_settings` for the environment-aware
resolver.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FanoutSettings:
    """Read-only configuration handed to every destination ``open`` call.

    Attributes
    ----------
    process_name:
        Program name used for the syslog identity.
    syslog_facility:
        Facility name resolved to a native constant by the syslog destination.
    autoflush:
        Initial ``autoflush`` state of file destinations.
    trace:
        Attach tracebacks when reporting destination failures.
    host_timeout:
        Seconds allowed for connecting to and sending to a remote collector.
    force_color, no_color:
        Console colour switches forwarded to :class:`rich.console.Console`.
    """

    process_name: str = "agent"
    syslog_facility: str = "daemon"
    autoflush: bool = False
    trace: bool = False
    host_timeout: float = 5.0
    force_color: bool = False
    no_color: bool = False


DEFAULT_SETTINGS = FanoutSettings()


__all__ = ["DEFAULT_SETTINGS", "FanoutSettings"]
