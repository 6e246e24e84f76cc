"""Destination capability contract implemented by every sink kind.

Purpose
-------
Formalise what the router and registry may ask of a sink: environment
suitability, target matching, construction, emission, flushing, and release.

Contents
--------
* :class:`Destination` - abstract base with explicit defaults and the
  ``open -> emit* -> closed`` lifecycle.
* :func:`target_key` - normalise a target into the hashable part of an
  identity.

System Role
-----------
Sits between the application layer (registry, router) and the adapters.
``emit`` never raises: it converts failures into
:class:`~lib_log_fanout.domain.outcome.EmitOutcome` values the router consumes.
"""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import Any, ClassVar

from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import ConfigurationError, DestinationClosedError, SerializationError
from lib_log_fanout.domain.message import LogMessage
from lib_log_fanout.domain.outcome import EmitOutcome, Identity


def target_key(target: Any) -> Hashable:
    """Return the hashable identity component for ``target``.

    Examples
    --------
    >>> target_key(None) is None
    True
    >>> target_key("/var/log/agent.log")
    '/var/log/agent.log'
    >>> collected = []
    >>> target_key(collected) == id(collected)
    True
    """

    if target is None:
        return None
    if isinstance(target, (str, os.PathLike)):
        return os.fspath(target)
    return id(target)


class Destination(ABC):
    """Base class for every destination kind.

    Subclasses set :attr:`kind`, implement :meth:`_write`, and override the
    capability classmethods or :meth:`_release` when their backend needs it.
    """

    kind: ClassVar[str] = ""
    takes_target: ClassVar[bool] = False
    deactivate_on_failure: ClassVar[bool] = False

    def __init__(self, target: Any = None) -> None:
        self._target = target
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def suitable(cls) -> bool:
        """Return ``True`` when this kind can run in the current environment."""

        return True

    @classmethod
    def matches(cls, target: Any) -> bool:
        """Return ``True`` when this kind claims ``target`` implicitly."""

        return False

    @classmethod
    def identity_key(cls, target: Any) -> Hashable:
        """Return the identity component for ``target``; equivalent targets share one key."""

        return target_key(target)

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "Destination":
        """Construct and fully initialise an instance bound to ``target``."""

        if cls.takes_target:
            if target is None:
                raise ConfigurationError(f"destination {cls.kind!r} requires a target")
            return cls(target)
        return cls()

    @property
    def target(self) -> Any:
        return self._target

    @property
    def identity(self) -> Identity:
        return (self.kind, type(self).identity_key(self._target) if self.takes_target else None)

    @property
    def closed(self) -> bool:
        return self._closed

    def describe(self) -> str:
        """Return a short human-readable label (``file /var/log/x.log``)."""

        if self.takes_target and self._target is not None:
            shown = os.fspath(self._target) if isinstance(self._target, (str, os.PathLike)) else type(self._target).__name__
            return f"{self.kind} {shown}"
        return self.kind

    def emit(self, message: LogMessage) -> EmitOutcome:
        """Format and write ``message``; never raises."""

        with self._lock:
            if self._closed:
                return EmitOutcome.failure(DestinationClosedError(f"{self.describe()} is closed"), deactivate=True)
            try:
                outcome = self._write(message)
            except SerializationError as exc:
                return EmitOutcome.failure(exc)
            except Exception as exc:  # noqa: BLE001
                return EmitOutcome.failure(exc, deactivate=self.deactivate_on_failure)
        return outcome if outcome is not None else EmitOutcome.success()

    def flush(self) -> None:
        with self._lock:
            if not self._closed:
                self._flush()

    def close(self) -> None:
        """Release owned resources; further calls are no-ops."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._release()

    @abstractmethod
    def _write(self, message: LogMessage) -> EmitOutcome | None:
        """Write ``message`` to the backend, raising on failure."""

    def _flush(self) -> None:
        return None

    def _release(self) -> None:
        return None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {self.describe()} ({state})>"


__all__ = ["Destination", "target_key"]
