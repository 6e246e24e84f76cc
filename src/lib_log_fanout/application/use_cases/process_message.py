"""Use case turning front-end logging calls into dispatched messages.

Purpose
-------
Stamp caller input with the clock, build the immutable
:class:`~lib_log_fanout.domain.message.LogMessage`, and hand it to the router.

Contents
--------
* :func:`create_process_message` factory returning the runtime callable.

System Role
-----------
Invoked by :mod:`lib_log_fanout.runtime` logger proxies; keeps message
construction in one place so every front end produces identical messages.
"""

from __future__ import annotations

from typing import Protocol

from lib_log_fanout.application.ports.time import ClockPort
from lib_log_fanout.application.router import DestinationRouter
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import SYSTEM_SOURCE, LogMessage
from lib_log_fanout.domain.outcome import DispatchReport


class ProcessCallable(Protocol):
    def __call__(
        self,
        *,
        level: Severity | str,
        text: str,
        source: str = SYSTEM_SOURCE,
        remote: bool = False,
        multiline: str | None = None,
    ) -> DispatchReport: ...


def create_process_message(*, router: DestinationRouter, clock: ClockPort) -> ProcessCallable:
    """Build the callable that creates and dispatches one message per call.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_fanout.adapters.destinations import create_default_registry
    >>> class FixedClock:
    ...     def now(self):
    ...         return datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
    >>> router = DestinationRouter(create_default_registry())
    >>> logs = []
    >>> _ = router.activate("array", logs)
    >>> process = create_process_message(router=router, clock=FixedClock())
    >>> process(level="notice", text="applied", source="svc").ok
    True
    >>> logs[0].level.severity, logs[0].source, logs[0].time.year
    ('notice', 'svc', 2025)
    """

    def process(
        *,
        level: Severity | str,
        text: str,
        source: str = SYSTEM_SOURCE,
        remote: bool = False,
        multiline: str | None = None,
    ) -> DispatchReport:
        message = LogMessage(
            level=Severity.coerce(level),
            text=text,
            source=source,
            time=clock.now(),
            remote=remote,
            multiline=multiline,
        )
        return router.dispatch(message)

    return process


__all__ = ["ProcessCallable", "create_process_message"]
