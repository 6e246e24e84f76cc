"""Runtime composition helpers wiring registry, router, and destinations.

Purpose
-------
Translate :class:`RuntimeSettings` into the live :class:`LoggingRuntime`
singleton. The helpers keep wiring small, declarative, and testable, and are
shared with the CLI.

Contents
--------
* :class:`SystemClock` - UTC clock port.
* :func:`build_router` - registry + fallback + router.
* :func:`activate_spec` - activate one configured destination entry.
* :func:`build_runtime` - full composition root.
* :class:`LoggerProxy` - source-bound helpers returned by ``get``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from lib_log_fanout.adapters.console import ConsoleDestination
from lib_log_fanout.adapters.destinations import create_default_registry
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.ports.time import ClockPort
from lib_log_fanout.application.registry import DestinationRegistry
from lib_log_fanout.application.router import DestinationRouter, DiagnosticHook
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.application.use_cases.process_message import ProcessCallable, create_process_message
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.outcome import DispatchReport

from ._settings import RuntimeSettings
from ._state import LoggingRuntime

logger = logging.getLogger(__name__)


class SystemClock(ClockPort):
    """Concrete clock returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def build_fallback(settings: FanoutSettings) -> Destination:
    """Return the stderr console used to report destination failures."""

    return ConsoleDestination(stderr=True, colorize=False, no_color=settings.no_color)


def build_router(
    settings: FanoutSettings,
    *,
    registry: DestinationRegistry | None = None,
    fallback: bool = True,
    diagnostic: DiagnosticHook | None = None,
) -> DestinationRouter:
    return DestinationRouter(
        registry if registry is not None else create_default_registry(),
        settings,
        fallback=build_fallback(settings) if fallback else None,
        diagnostic=diagnostic,
    )


def activate_spec(router: DestinationRouter, spec: Any) -> Destination:
    """Activate one destination entry.

    ``spec`` is a ``(kind, target)`` tuple, a ``kind=target`` string, a kind
    name, or a bare target resolved implicitly.
    """

    if isinstance(spec, tuple) and len(spec) == 2:
        return router.activate(spec[0], spec[1])
    if isinstance(spec, str):
        kind, separator, target = spec.partition("=")
        if separator and kind.strip() in router.registry:
            return router.activate(kind.strip(), target.strip())
        return router.activate(spec.strip())
    return router.activate(spec)


def build_runtime(resolved: RuntimeSettings, *, registry: DestinationRegistry | None = None) -> LoggingRuntime:
    """Assemble the logging runtime and activate the configured destinations.

    When activation fails, already opened destinations are shut down before
    the configuration error propagates.
    """

    router = build_router(
        resolved.settings,
        registry=registry,
        fallback=resolved.fallback,
        diagnostic=resolved.diagnostic_hook,
    )
    try:
        for spec in resolved.destinations:
            activate_spec(router, spec)
    except Exception:
        router.shutdown()
        raise
    logger.debug("Runtime composed with %d active destination(s)", len(router))
    clock: ClockPort = SystemClock()
    return LoggingRuntime(
        registry=router.registry,
        router=router,
        settings=resolved.settings,
        process=create_process_message(router=router, clock=clock),
    )


class LoggerProxy:
    """Lightweight facade for source-bound logging calls.

    Each helper builds one message at the named severity and returns the
    :class:`DispatchReport` describing which destinations accepted it.
    """

    def __init__(self, source: str, process: ProcessCallable) -> None:
        self._source = source
        self._process = process

    @property
    def source(self) -> str:
        return self._source

    def debug(self, text: str, **kwargs: Any) -> DispatchReport:
        return self.log(Severity.DEBUG, text, **kwargs)

    def info(self, text: str, **kwargs: Any) -> DispatchReport:
        return self.log(Severity.INFO, text, **kwargs)

    def notice(self, text: str, **kwargs: Any) -> DispatchReport:
        return self.log(Severity.NOTICE, text, **kwargs)

    def warning(self, text: str, **kwargs: Any) -> DispatchReport:
        return self.log(Severity.WARNING, text, **kwargs)

    def err(self, text: str, **kwargs: Any) -> DispatchReport:
        """Emit an ``err`` message signalling a user-visible failure."""

        return self.log(Severity.ERR, text, **kwargs)

    def alert(self, text: str, **kwargs: Any) -> DispatchReport:
        return self.log(Severity.ALERT, text, **kwargs)

    def emerg(self, text: str, **kwargs: Any) -> DispatchReport:
        return self.log(Severity.EMERG, text, **kwargs)

    def crit(self, text: str, **kwargs: Any) -> DispatchReport:
        return self.log(Severity.CRIT, text, **kwargs)

    def log(
        self,
        level: Severity | str,
        text: str,
        *,
        remote: bool = False,
        multiline: str | None = None,
    ) -> DispatchReport:
        """Dispatch ``text`` at ``level`` under this proxy's source."""

        return self._process(level=level, text=text, source=self._source, remote=remote, multiline=multiline)


__all__ = ["LoggerProxy", "SystemClock", "activate_spec", "build_fallback", "build_router", "build_runtime"]
