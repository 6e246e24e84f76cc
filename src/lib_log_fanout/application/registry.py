"""Registry mapping destination kind names to descriptors.

Purpose
-------
Resolve configuration values into destination instances, either by explicit
kind name or by asking every suitable kind whether it claims a bare target.

Contents
--------
* :class:`DestinationDescriptor` - constructor plus suitability/match
  predicates and an explicit match priority.
* :class:`DestinationRegistry` - registration, lookup, and resolution.

System Role
-----------
Populated once at start-up (see
:func:`lib_log_fanout.adapters.destinations.register_default_destinations`) and
consulted by :class:`~lib_log_fanout.application.router.DestinationRouter`
whenever a destination is activated.

Alignment Notes
---------------
Implicit matches are ordered by ``priority`` (highest wins). Two suitable kinds
claiming the same target with equal top priority is a configuration error
rather than a registration-order accident.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass
from typing import Any

from lib_log_fanout.application.ports.destination import Destination, target_key
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import (
    AmbiguousDestinationError,
    ConfigurationError,
    UnknownDestinationError,
    UnsupportedDestinationError,
)

logger = logging.getLogger(__name__)

Factory = Callable[[Any, FanoutSettings], Destination]


def _never(_target: Any) -> bool:
    return False


def _always() -> bool:
    return True


@dataclass(slots=True, frozen=True)
class DestinationDescriptor:
    """Registry entry describing how to build and select one destination kind."""

    kind: str
    factory: Factory
    suitable: Callable[[], bool] = _always
    matches: Callable[[Any], bool] = _never
    priority: int = 0
    takes_target: bool = False
    identity_key: Callable[[Any], Hashable] = target_key

    def __post_init__(self) -> None:
        if not self.kind or not self.kind.strip():
            raise ValueError("kind must not be empty")
        object.__setattr__(self, "kind", self.kind.strip().lower())

    @classmethod
    def for_type(cls, destination_type: type[Destination], *, priority: int = 0) -> "DestinationDescriptor":
        """Build a descriptor from a :class:`Destination` subclass."""

        return cls(
            kind=destination_type.kind,
            factory=destination_type.open,
            suitable=destination_type.suitable,
            matches=destination_type.matches,
            priority=priority,
            takes_target=destination_type.takes_target,
            identity_key=destination_type.identity_key,
        )

    def is_suitable(self) -> bool:
        """Evaluate the suitability predicate, treating probe errors as unsuitable."""

        try:
            return bool(self.suitable())
        except Exception:  # noqa: BLE001
            logger.warning("Suitability probe for destination %r raised; treating as unsuitable", self.kind, exc_info=True)
            return False

    def claims(self, target: Any) -> bool:
        try:
            return bool(self.matches(target))
        except Exception:  # noqa: BLE001
            logger.warning("Match predicate for destination %r raised; ignoring", self.kind, exc_info=True)
            return False


class DestinationRegistry:
    """Thread-safe mapping from kind name to :class:`DestinationDescriptor`.

    Examples
    --------
    >>> from lib_log_fanout.domain import EmitOutcome
    >>> class Null(Destination):
    ...     kind = "null"
    ...     def _write(self, message):
    ...         return EmitOutcome.success()
    >>> registry = DestinationRegistry()
    >>> registry.register_type(Null).kind
    'null'
    >>> "null" in registry, registry.kinds()
    (True, ['null'])
    """

    def __init__(self) -> None:
        self._descriptors: dict[str, DestinationDescriptor] = {}
        self._lock = threading.RLock()

    def register(self, descriptor: DestinationDescriptor, *, replace: bool = False) -> DestinationDescriptor:
        """Add ``descriptor``; duplicate kinds raise unless ``replace`` is set."""

        with self._lock:
            if descriptor.kind in self._descriptors and not replace:
                raise ValueError(f"destination kind {descriptor.kind!r} is already registered")
            self._descriptors[descriptor.kind] = descriptor
        return descriptor

    def register_type(
        self,
        destination_type: type[Destination],
        *,
        priority: int = 0,
        replace: bool = False,
    ) -> DestinationDescriptor:
        return self.register(DestinationDescriptor.for_type(destination_type, priority=priority), replace=replace)

    def unregister(self, kind: str) -> None:
        with self._lock:
            self._descriptors.pop(kind.strip().lower(), None)

    def kinds(self) -> list[str]:
        """Return registered kind names in registration order."""

        with self._lock:
            return list(self._descriptors)

    def describe(self, kind: str) -> DestinationDescriptor:
        with self._lock:
            try:
                return self._descriptors[kind.strip().lower()]
            except KeyError as exc:
                raise UnknownDestinationError(
                    f"unknown destination kind {kind!r}; available: {', '.join(self._descriptors) or 'none'}"
                ) from exc

    def suitable_kinds(self) -> list[str]:
        return [descriptor.kind for descriptor in self if descriptor.is_suitable()]

    def __contains__(self, kind: object) -> bool:
        if not isinstance(kind, str):
            return False
        with self._lock:
            return kind.strip().lower() in self._descriptors

    def __iter__(self) -> Iterator[DestinationDescriptor]:
        with self._lock:
            return iter(list(self._descriptors.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)

    def resolve(self, kind: str) -> DestinationDescriptor:
        """Return the descriptor for an explicitly named, suitable ``kind``."""

        descriptor = self.describe(kind)
        if not descriptor.is_suitable():
            raise UnsupportedDestinationError(f"destination kind {descriptor.kind!r} is not supported in this environment")
        return descriptor

    def resolve_target(self, target: Any) -> DestinationDescriptor:
        """Return the suitable descriptor claiming ``target`` with the highest priority."""

        candidates = [descriptor for descriptor in self if descriptor.is_suitable() and descriptor.claims(target)]
        if not candidates:
            raise UnknownDestinationError(f"no destination recognizes target {target!r}")
        top = max(descriptor.priority for descriptor in candidates)
        winners = [descriptor for descriptor in candidates if descriptor.priority == top]
        if len(winners) > 1:
            names = ", ".join(descriptor.kind for descriptor in winners)
            raise AmbiguousDestinationError(f"target {target!r} is claimed by several destinations: {names}")
        return winners[0]

    def open(self, kind: str | None, target: Any, settings: FanoutSettings) -> Destination:
        """Resolve and construct a destination.

        ``kind`` selects explicitly; ``None`` resolves ``target`` implicitly.
        """

        descriptor = self.resolve(kind) if kind is not None else self.resolve_target(target)
        if descriptor.takes_target and target is None:
            raise ConfigurationError(f"destination {descriptor.kind!r} requires a target")
        return descriptor.factory(target if descriptor.takes_target else None, settings)


__all__ = ["DestinationDescriptor", "DestinationRegistry"]
