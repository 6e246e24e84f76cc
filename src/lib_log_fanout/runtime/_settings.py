"""Runtime configuration resolution.

Explicit :class:`RuntimeConfig` values win; unset fields fall back to ``LOG_*``
environment variables and finally to the :class:`FanoutSettings` defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Sequence

from lib_log_fanout.application.router import DiagnosticHook
from lib_log_fanout.application.settings import DEFAULT_SETTINGS, FanoutSettings

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

DEFAULT_DESTINATIONS: tuple[str, ...] = ("console",)


@dataclass(slots=True)
class RuntimeConfig:
    """Caller-supplied configuration for :func:`lib_log_fanout.runtime.init`.

    ``None`` means "not specified": the environment or the defaults decide.
    ``destinations`` entries may be kind names, ``kind=target`` strings, bare
    targets (absolute paths, report objects, collectors), or
    ``(kind, target)`` tuples.
    """

    process_name: str | None = None
    syslog_facility: str | None = None
    autoflush: bool | None = None
    trace: bool | None = None
    host_timeout: float | None = None
    force_color: bool | None = None
    no_color: bool | None = None
    destinations: Sequence[Any] | None = None
    diagnostic_hook: DiagnosticHook | None = None
    fallback: bool = True


@dataclass(slots=True, frozen=True)
class RuntimeSettings:
    """Fully resolved configuration consumed by the composition root."""

    settings: FanoutSettings
    destinations: tuple[Any, ...] = field(default_factory=tuple)
    diagnostic_hook: DiagnosticHook | None = None
    fallback: bool = True


def env_bool(name: str, default: bool) -> bool:
    """Return the boolean value of environment variable ``name``.

    Examples
    --------
    >>> import os
    >>> os.environ["LOG_EXAMPLE_FLAG"] = "yes"
    >>> env_bool("LOG_EXAMPLE_FLAG", False)
    True
    >>> del os.environ["LOG_EXAMPLE_FLAG"]
    >>> env_bool("LOG_EXAMPLE_FLAG", False)
    False
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


def env_positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def parse_destinations(raw: str | None) -> tuple[str, ...]:
    """Split a comma separated ``LOG_DESTINATIONS`` value.

    Examples
    --------
    >>> parse_destinations("console, file=/var/log/agent.log")
    ('console', 'file=/var/log/agent.log')
    >>> parse_destinations(None)
    ('console',)
    """

    if raw is None or not raw.strip():
        return DEFAULT_DESTINATIONS
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def build_runtime_settings(config: RuntimeConfig) -> RuntimeSettings:
    """Merge ``config`` with the environment into :class:`RuntimeSettings`."""

    host_timeout = config.host_timeout
    if host_timeout is not None and host_timeout <= 0:
        raise ValueError(f"host_timeout must be positive, got {host_timeout!r}")

    settings = FanoutSettings(
        process_name=config.process_name or env_str("LOG_PROCESS_NAME", DEFAULT_SETTINGS.process_name),
        syslog_facility=config.syslog_facility or env_str("LOG_SYSLOG_FACILITY", DEFAULT_SETTINGS.syslog_facility),
        autoflush=_pick(config.autoflush, "LOG_AUTOFLUSH", DEFAULT_SETTINGS.autoflush),
        trace=_pick(config.trace, "LOG_TRACE", DEFAULT_SETTINGS.trace),
        host_timeout=host_timeout if host_timeout is not None else env_positive_float("LOG_HOST_TIMEOUT", DEFAULT_SETTINGS.host_timeout),
        force_color=_pick(config.force_color, "LOG_FORCE_COLOR", DEFAULT_SETTINGS.force_color),
        no_color=_pick(config.no_color, "LOG_NO_COLOR", DEFAULT_SETTINGS.no_color),
    )
    if config.destinations is not None:
        destinations = tuple(config.destinations)
    else:
        destinations = parse_destinations(os.getenv("LOG_DESTINATIONS"))
    return RuntimeSettings(
        settings=settings,
        destinations=destinations,
        diagnostic_hook=config.diagnostic_hook,
        fallback=config.fallback,
    )


def _pick(value: bool | None, env_name: str, default: bool) -> bool:
    return value if value is not None else env_bool(env_name, default)


__all__ = [
    "DEFAULT_DESTINATIONS",
    "RuntimeConfig",
    "RuntimeSettings",
    "build_runtime_settings",
    "env_bool",
    "env_positive_float",
    "parse_destinations",
]
