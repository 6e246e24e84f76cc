"""Runtime facade that wires registry, router, and destinations.

Purpose
-------
Expose a stable entry point (``init``, ``get``, ``activate``, ``dispatch``,
``shutdown``) that host applications use instead of importing the inner
layers directly.

Contents
--------
* ``init`` - composition root for assembling the fan-out pipeline.
* ``get`` - accessor returning source-bound :class:`LoggerProxy` objects.
* ``activate`` / ``deactivate`` - change the active destination set at runtime.
* ``dispatch`` / ``flush`` - deliver prepared messages and push buffered output.
* ``shutdown`` - deterministic teardown in reverse activation order.
* ``inspect_runtime`` - read-only snapshot for diagnostics and the CLI.

System Role
-----------
Forms the outer shell: the process-wide singleton lives here so that the
application layer never depends on global state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.domain.message import SYSTEM_SOURCE, LogMessage
from lib_log_fanout.domain.outcome import DispatchReport, Identity

from ._composition import LoggerProxy, activate_spec, build_runtime
from ._settings import RuntimeConfig, build_runtime_settings
from ._state import LoggingRuntime, clear_runtime, current_runtime, is_initialised, set_runtime


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active logging runtime."""

    process_name: str
    syslog_facility: str
    kinds: tuple[str, ...]
    suitable_kinds: tuple[str, ...]
    active: tuple[Identity, ...]
    fallback_present: bool
    trace: bool


def init(config: RuntimeConfig | None = None, **overrides: Any) -> None:
    """Compose the logging runtime and install it as the active singleton.

    ``overrides`` are applied on top of ``config`` (or a blank
    :class:`RuntimeConfig`) using the same field names.

    Raises
    ------
    RuntimeError
        When a runtime is already active.
    ConfigurationError
        When a configured destination cannot be activated.
    ValueError
        When an environment override is malformed.
    """

    if is_initialised():
        raise RuntimeError("lib_log_fanout.init() cannot be called twice without shutdown(); call lib_log_fanout.shutdown() first")
    base = config if config is not None else RuntimeConfig()
    if overrides:
        base = replace(base, **overrides)
    runtime = build_runtime(build_runtime_settings(base))
    set_runtime(runtime)


def get(source: str = SYSTEM_SOURCE) -> LoggerProxy:
    """Return a logger proxy whose messages carry ``source``."""

    runtime = current_runtime()
    return LoggerProxy(source, runtime.process)


def activate(kind_or_target: Any, target: Any = None) -> Destination:
    """Activate a destination on the running router (idempotent per identity).

    Accepts the same forms as the ``destinations`` configuration entries.
    """

    router = current_runtime().router
    if target is not None:
        return router.activate(kind_or_target, target)
    return activate_spec(router, kind_or_target)


def deactivate(ref: Any) -> bool:
    return current_runtime().router.deactivate(ref)


def dispatch(message: LogMessage) -> DispatchReport:
    """Deliver a prepared message to every active destination."""

    return current_runtime().router.dispatch(message)


def flush() -> None:
    current_runtime().router.flush()


def shutdown() -> list[BaseException]:
    """Close every destination and clear the runtime state.

    Returns the errors raised while closing; they are logged, never raised.
    """

    runtime = current_runtime()
    try:
        return runtime.router.shutdown()
    finally:
        clear_runtime()


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = current_runtime()
    return RuntimeSnapshot(
        process_name=runtime.settings.process_name,
        syslog_facility=runtime.settings.syslog_facility,
        kinds=tuple(runtime.registry.kinds()),
        suitable_kinds=tuple(runtime.registry.suitable_kinds()),
        active=tuple(runtime.router.identities),
        fallback_present=runtime.router.fallback is not None,
        trace=runtime.settings.trace,
    )


__all__ = [
    "LoggerProxy",
    "LoggingRuntime",
    "RuntimeConfig",
    "RuntimeSnapshot",
    "activate",
    "deactivate",
    "dispatch",
    "flush",
    "get",
    "init",
    "inspect_runtime",
    "is_initialised",
    "shutdown",
]
