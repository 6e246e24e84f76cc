"""Port for transaction reports that collect raw log messages."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_fanout.domain.message import LogMessage


@runtime_checkable
class ReportPort(Protocol):
    """Report object the ``report`` destination appends into."""

    def add_log(self, message: LogMessage) -> None:
        """Record ``message`` in the report."""


__all__ = ["ReportPort"]
