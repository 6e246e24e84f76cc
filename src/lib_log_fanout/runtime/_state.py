"""Runtime state container and access helpers."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock

from lib_log_fanout.application.registry import DestinationRegistry
from lib_log_fanout.application.router import DestinationRouter
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.application.use_cases.process_message import ProcessCallable


@dataclass(slots=True)
class LoggingRuntime:
    """Aggregate of live collaborators assembled by the composition root."""

    registry: DestinationRegistry
    router: DestinationRouter
    settings: FanoutSettings
    process: ProcessCallable


_STATE: LoggingRuntime | None = None
_STATE_LOCK = RLock()


def set_runtime(runtime: LoggingRuntime) -> None:
    """Install ``runtime`` as the active singleton."""

    with _STATE_LOCK:
        global _STATE
        _STATE = runtime


def clear_runtime() -> None:
    """Remove the active runtime if present."""

    with _STATE_LOCK:
        global _STATE
        _STATE = None


def current_runtime() -> LoggingRuntime:
    """Return the active runtime or raise when uninitialised."""

    with _STATE_LOCK:
        if _STATE is None:
            raise RuntimeError("lib_log_fanout.init() must be called before using the logging API")
        return _STATE


def is_initialised() -> bool:
    """Return ``True`` when :func:`lib_log_fanout.init` has been called."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = [
    "LoggingRuntime",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
