"""Result values exchanged between destinations and the router.

Purpose
-------
Replace exception-driven control flow at the fan-out boundary with explicit
values: each ``emit`` reports success or failure, and may ask the router to
retire the destination.

Contents
--------
* :class:`EmitOutcome` - result of a single ``emit`` call.
* :class:`DispatchReport` - aggregate of one fan-out pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Hashable
from typing import Any

from .message import LogMessage

Identity = tuple[str, Hashable]
#: ``(kind, target_key)`` pair identifying an active destination.


@dataclass(slots=True, frozen=True)
class EmitOutcome:
    """Outcome of writing one message to one destination.

    Examples
    --------
    >>> EmitOutcome.success().ok
    True
    >>> failed = EmitOutcome.failure(OSError("down"), deactivate=True)
    >>> failed.ok, failed.deactivate, str(failed.error)
    (False, True, 'down')
    """

    ok: bool
    error: BaseException | None = None
    deactivate: bool = False
    skipped: bool = False

    @classmethod
    def success(cls) -> "EmitOutcome":
        return cls(ok=True)

    @classmethod
    def skip(cls) -> "EmitOutcome":
        """Message intentionally not written (e.g. relayed messages)."""
        return cls(ok=True, skipped=True)

    @classmethod
    def failure(cls, error: BaseException, *, deactivate: bool = False) -> "EmitOutcome":
        return cls(ok=False, error=error, deactivate=deactivate)


@dataclass(slots=True, frozen=True)
class DispatchReport:
    """Per-destination outcomes of a single :meth:`DestinationRouter.dispatch`."""

    message: LogMessage
    outcomes: tuple[tuple[Identity, EmitOutcome], ...] = ()

    @property
    def delivered(self) -> tuple[Identity, ...]:
        """Identities that accepted the message (including intentional skips)."""

        return tuple(identity for identity, outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> tuple[Identity, ...]:
        return tuple(identity for identity, outcome in self.outcomes if not outcome.ok)

    @property
    def deactivated(self) -> tuple[Identity, ...]:
        return tuple(identity for identity, outcome in self.outcomes if outcome.deactivate)

    @property
    def ok(self) -> bool:
        """Return ``True`` when no destination failed."""

        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.message.level.severity,
            "delivered": [list(identity) for identity in self.delivered],
            "failed": [
                {"kind": identity[0], "target": identity[1], "error": repr(outcome.error)}
                for identity, outcome in self.outcomes
                if not outcome.ok
            ],
            "deactivated": [list(identity) for identity in self.deactivated],
        }


__all__ = ["DispatchReport", "EmitOutcome", "Identity"]
