"""Router fanning every message out to the active destinations.

Purpose
-------
Own the ordered set of active destination instances, activate and retire them
through the registry, and deliver each message to all of them while isolating
failures.

Contents
--------
* :class:`DestinationRouter` - ``activate``/``deactivate``/``dispatch``/
  ``shutdown`` plus introspection helpers.
* :data:`DIAGNOSTIC_EVENTS` - stable names passed to the diagnostic hook.

System Role
-----------
Application-layer orchestrator. Destinations report failures as
:class:`~lib_log_fanout.domain.outcome.EmitOutcome` values; the router decides
how they are reported (fallback destination, module logger, diagnostic hook)
and retires destinations that asked to be deactivated once the fan-out loop
has finished.
"""

from __future__ import annotations

import logging
import threading
import traceback
from collections.abc import Callable, Sequence
from typing import Any

from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.registry import DestinationRegistry
from lib_log_fanout.application.settings import DEFAULT_SETTINGS, FanoutSettings
from lib_log_fanout.domain.errors import ConfigurationError, DestinationClosedError
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import SYSTEM_SOURCE, LogMessage
from lib_log_fanout.domain.outcome import DispatchReport, EmitOutcome, Identity

logger = logging.getLogger(__name__)

DiagnosticHook = Callable[[str, dict[str, Any]], None]

DIAGNOSTIC_EVENTS: tuple[str, ...] = (
    "destination_activated",
    "destination_deactivated",
    "destination_self_deactivated",
    "emit_failed",
    "close_failed",
)


def _key_for(destination: Destination, ref: Any) -> Any:
    """Return ``ref`` keyed the way ``destination`` keys its own target, or ``None``."""

    try:
        return type(destination).identity_key(ref)
    except (ConfigurationError, TypeError, ValueError):
        return None


class DestinationRouter:
    """Hold the active destinations and deliver messages to each of them.

    Parameters
    ----------
    registry:
        :class:`DestinationRegistry` used to resolve kinds and targets.
    settings:
        :class:`FanoutSettings` handed to every destination ``open`` call.
    fallback:
        Destination that receives failure reports. It is never part of the
        active set. ``None`` leaves reporting to the module logger.
    diagnostic:
        Optional callback invoked with ``(event_name, payload)`` for lifecycle
        and failure milestones.

    Examples
    --------
    >>> from lib_log_fanout.adapters.destinations import create_default_registry
    >>> from lib_log_fanout.domain import LogCollector
    >>> router = DestinationRouter(create_default_registry())
    >>> collector = LogCollector()
    >>> _ = router.activate(collector)
    >>> router.dispatch(LogMessage(level="info", text="hello")).ok
    True
    >>> collector.texts()
    ['hello']
    >>> router.shutdown()
    []
    """

    def __init__(
        self,
        registry: DestinationRegistry,
        settings: FanoutSettings = DEFAULT_SETTINGS,
        *,
        fallback: Destination | None = None,
        diagnostic: DiagnosticHook | None = None,
    ) -> None:
        self._registry = registry
        self._settings = settings
        self._fallback = fallback
        self._diagnostic = diagnostic
        self._active: list[Destination] = []
        self._lock = threading.RLock()

    @property
    def registry(self) -> DestinationRegistry:
        return self._registry

    @property
    def settings(self) -> FanoutSettings:
        return self._settings

    @property
    def fallback(self) -> Destination | None:
        return self._fallback

    @property
    def active(self) -> list[Destination]:
        """Return a snapshot of active destinations in activation order."""

        with self._lock:
            return list(self._active)

    @property
    def identities(self) -> list[Identity]:
        return [destination.identity for destination in self.active]

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)

    def __contains__(self, ref: object) -> bool:
        return self._find(ref) is not None

    def activate(self, kind_or_target: Any, target: Any = None) -> Destination:
        """Resolve, open, and add a destination; existing identities are reused.

        A string naming a registered kind selects that kind with ``target``;
        any other value (or an unregistered string) is resolved implicitly.
        Configuration errors propagate and leave the active set untouched.
        """

        kind, resolved_target = self._split_request(kind_or_target, target)
        with self._lock:
            descriptor = (
                self._registry.resolve(kind) if kind is not None else self._registry.resolve_target(resolved_target)
            )
            identity = (descriptor.kind, descriptor.identity_key(resolved_target) if descriptor.takes_target else None)
            existing = self._find_identity(identity)
            if existing is not None:
                return existing
            destination = self._registry.open(descriptor.kind, resolved_target, self._settings)
            self._active.append(destination)
        logger.info("Activated log destination %s", destination.describe())
        self._emit_diagnostic("destination_activated", {"kind": identity[0], "target": identity[1]})
        return destination

    def deactivate(self, ref: Any) -> bool:
        """Close and remove the destination matching ``ref``.

        ``ref`` may be an instance, an identity tuple, a kind name, or a target
        value. Close errors are logged, never raised. Returns ``True`` when a
        destination was removed.
        """

        with self._lock:
            destination = self._find(ref)
            if destination is None:
                return False
            self._active.remove(destination)
        self._close_quietly(destination)
        logger.info("Deactivated log destination %s", destination.describe())
        self._emit_diagnostic(
            "destination_deactivated", {"kind": destination.identity[0], "target": destination.identity[1]}
        )
        return True

    def dispatch(self, message: LogMessage) -> DispatchReport:
        """Deliver ``message`` to every active destination in activation order.

        Never raises. Destinations whose outcome requests deactivation are
        retired after every destination has been offered the message.
        """

        outcomes: list[tuple[Identity, EmitOutcome]] = []
        retire: list[Destination] = []
        for destination in self.active:
            outcome = self._emit_isolated(destination, message)
            if self._deactivated_meanwhile(destination, outcome):
                outcome = EmitOutcome.skip()
            outcomes.append((destination.identity, outcome))
            if not outcome.ok:
                self._report_failure(destination, message, outcome)
            if outcome.deactivate:
                retire.append(destination)
        for destination in retire:
            if self.deactivate(destination):
                logger.warning("Log destination %s deactivated itself after a failure", destination.describe())
                self._emit_diagnostic(
                    "destination_self_deactivated",
                    {"kind": destination.identity[0], "target": destination.identity[1]},
                )
        return DispatchReport(message=message, outcomes=tuple(outcomes))

    def flush(self) -> None:
        for destination in self.active:
            try:
                destination.flush()
            except Exception:  # noqa: BLE001
                logger.error("Flushing log destination %s failed", destination.describe(), exc_info=True)

    def shutdown(self) -> list[BaseException]:
        """Deactivate every destination in reverse activation order.

        Returns the close errors encountered; none of them abort the sequence.
        """

        with self._lock:
            doomed = list(reversed(self._active))
            self._active.clear()
        errors: list[BaseException] = []
        for destination in doomed:
            error = self._close_quietly(destination)
            if error is not None:
                errors.append(error)
            self._emit_diagnostic(
                "destination_deactivated", {"kind": destination.identity[0], "target": destination.identity[1]}
            )
        if self._fallback is not None:
            error = self._close_quietly(self._fallback)
            if error is not None:
                errors.append(error)
        return errors

    def _split_request(self, kind_or_target: Any, target: Any) -> tuple[str | None, Any]:
        if isinstance(kind_or_target, str) and kind_or_target in self._registry:
            return kind_or_target, target
        if target is not None:
            # An explicit target was supplied with an unknown kind name.
            return str(kind_or_target), target
        return None, kind_or_target

    def _find(self, ref: Any) -> Destination | None:
        with self._lock:
            if isinstance(ref, Destination):
                return ref if any(candidate is ref for candidate in self._active) else None
            if isinstance(ref, tuple) and len(ref) == 2 and isinstance(ref[0], str):
                return self._find_identity(ref)
            if isinstance(ref, str) and ref in self._registry:
                for candidate in self._active:
                    if candidate.kind == ref.strip().lower():
                        return candidate
            for candidate in self._active:
                if candidate.takes_target and candidate.identity[1] == _key_for(candidate, ref):
                    return candidate
        return None

    def _find_identity(self, identity: Sequence[Any]) -> Destination | None:
        for candidate in self._active:
            if candidate.identity == tuple(identity):
                return candidate
        return None

    def _deactivated_meanwhile(self, destination: Destination, outcome: EmitOutcome) -> bool:
        """Return ``True`` when ``destination`` was deactivated after the dispatch snapshot."""

        if not isinstance(outcome.error, DestinationClosedError):
            return False
        with self._lock:
            return not any(candidate is destination for candidate in self._active)

    def _emit_isolated(self, destination: Destination, message: LogMessage) -> EmitOutcome:
        try:
            return destination.emit(message)
        except Exception as exc:  # noqa: BLE001
            return EmitOutcome.failure(exc, deactivate=destination.deactivate_on_failure)

    def _report_failure(self, destination: Destination, message: LogMessage, outcome: EmitOutcome) -> None:
        error = outcome.error
        exc_info = error if self._settings.trace and error is not None else None
        logger.error("Could not deliver to %s: %s", destination.describe(), error, exc_info=exc_info)
        self._emit_diagnostic(
            "emit_failed",
            {
                "kind": destination.identity[0],
                "target": destination.identity[1],
                "level": message.level.severity,
                "exception": repr(error),
                "deactivate": outcome.deactivate,
            },
        )
        if self._fallback is None:
            return
        text = f"Could not deliver to {destination.describe()}: {error}"
        if exc_info is not None:
            text += "\n" + "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()
        for notice in (LogMessage(level=Severity.ERR, text=text, source=SYSTEM_SOURCE), message):
            try:
                self._fallback.emit(notice)
            except Exception:  # noqa: BLE001
                logger.error("Fallback log destination raised while reporting a failure", exc_info=True)

    def _close_quietly(self, destination: Destination) -> BaseException | None:
        try:
            destination.close()
        except Exception as exc:  # noqa: BLE001
            logger.error("Closing log destination %s failed", destination.describe(), exc_info=exc)
            self._emit_diagnostic(
                "close_failed",
                {"kind": destination.identity[0], "target": destination.identity[1], "exception": repr(exc)},
            )
            return exc
        return None

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception:  # noqa: BLE001
            logger.error("Diagnostic hook raised while reporting %s", name, exc_info=True)


__all__ = ["DIAGNOSTIC_EVENTS", "DestinationRouter", "DiagnosticHook"]
