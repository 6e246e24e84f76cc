"""Immutable log message travelling through the fan-out layer.

Purpose
-------
Provide the value object every destination consumes read-only, plus the
serialised representation used by remote collectors.

Contents
--------
* :data:`SYSTEM_SOURCE` sentinel naming the system itself as the source.
* :class:`LogMessage` dataclass with copy and serialisation helpers.
* Utility function ``_ensure_aware`` for timestamp validation.

System Role
-----------
Created by the logging front end, shared by all active destinations. Any
destination that needs a different ``source`` works on a private copy obtained
through :meth:`LogMessage.with_source`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from .levels import Severity

#: Source used when the message originates from the system itself.
SYSTEM_SOURCE = "Puppet"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("time must be timezone-aware")
    return ts.astimezone(timezone.utc)


@dataclass(slots=True, frozen=True)
class LogMessage:
    """Immutable log message delivered to every active destination.

    Attributes
    ----------
    level:
        :class:`Severity` of the message; names are coerced on construction.
    text:
        Rendered message text.
    source:
        Originator of the message; :data:`SYSTEM_SOURCE` for the system itself.
    time:
        Timezone-aware timestamp, normalised to UTC.
    remote:
        ``True`` when the message was relayed from another host. Forwarding
        destinations skip such messages to avoid loops.
    multiline:
        Optional multi-line rendering preferred by human-facing consoles.

    Examples
    --------
    >>> msg = LogMessage(level="info", text="hello")
    >>> msg.level is Severity.INFO, msg.source, str(msg)
    (True, 'Puppet', 'hello')
    >>> msg.with_source("h.d Puppet").source, msg.source
    ('h.d Puppet', 'Puppet')
    """

    level: Severity
    text: str
    source: str = SYSTEM_SOURCE
    time: datetime = field(default_factory=_utcnow)
    remote: bool = False
    multiline: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", Severity.coerce(self.level))
        if not isinstance(self.text, str):
            raise TypeError("text must be a string")
        object.__setattr__(self, "source", str(self.source))
        object.__setattr__(self, "time", _ensure_aware(self.time))
        object.__setattr__(self, "remote", bool(self.remote))

    def __str__(self) -> str:
        return self.text

    @property
    def from_system(self) -> bool:
        """Return ``True`` when the message was emitted by the system itself."""

        return self.source == SYSTEM_SOURCE

    @property
    def rendered(self) -> str:
        """Return the multi-line rendering when present, else the text."""

        return self.multiline if self.multiline is not None else self.text

    def with_source(self, source: str) -> "LogMessage":
        """Return a private copy carrying ``source``."""

        return replace(self, source=source)

    def replace(self, **changes: Any) -> "LogMessage":
        """Return a copied message with ``changes`` applied."""

        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the message to a dictionary with an ISO8601 timestamp."""

        data: dict[str, Any] = {
            "level": self.level.severity,
            "source": self.source,
            "text": self.text,
            "time": self.time.isoformat(),
            "remote": self.remote,
        }
        if self.multiline is not None:
            data["multiline"] = self.multiline
        return data

    def to_json(self) -> str:
        """Serialize the message to JSON with sorted keys for deterministic output."""

        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "LogMessage":
        """Reconstruct a message from :meth:`to_dict` output."""

        return cls(
            level=Severity.coerce(payload["level"]),
            text=payload["text"],
            source=payload.get("source", SYSTEM_SOURCE),
            time=datetime.fromisoformat(payload["time"]),
            remote=payload.get("remote", False),
            multiline=payload.get("multiline"),
        )


__all__ = ["LogMessage", "SYSTEM_SOURCE"]
