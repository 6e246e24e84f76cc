"""Minimal transaction report collaborator.

The report destination appends raw messages into any object implementing
:class:`lib_log_fanout.application.ports.report.ReportPort`. This module ships
a small concrete report so hosts without their own report type can still
collect per-run logs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .levels import Severity
from .message import LogMessage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class TransactionReport:
    """Mutable per-run report holding the logs produced during a transaction."""

    host: str
    time: datetime = field(default_factory=_utcnow)
    logs: list[LogMessage] = field(default_factory=list)

    def add_log(self, message: LogMessage) -> None:
        self.logs.append(message)

    def __lshift__(self, message: LogMessage) -> "TransactionReport":
        self.add_log(message)
        return self

    def highest_level(self) -> Severity | None:
        """Return the most severe level recorded, or ``None`` for an empty report."""

        if not self.logs:
            return None
        return max(message.level for message in self.logs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "time": self.time.isoformat(),
            "logs": [message.to_dict() for message in self.logs],
        }


__all__ = ["TransactionReport"]
