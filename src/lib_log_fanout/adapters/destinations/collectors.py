"""Destinations that hand raw messages to in-process collaborators.

Neither kind formats anything: the ``report`` destination appends into a
transaction report, the ``array`` destination into a :class:`LogCollector` (or
any mutable sequence) for deterministic test assertions.
"""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import Any

from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.ports.report import ReportPort
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.collector import LogCollector
from lib_log_fanout.domain.errors import ConfigurationError
from lib_log_fanout.domain.message import LogMessage


class ReportDestination(Destination):
    """Append every message to a report implementing :class:`ReportPort`."""

    kind = "report"
    takes_target = True

    def __init__(self, report: ReportPort) -> None:
        super().__init__(report)
        self._report = report

    @classmethod
    def matches(cls, target: Any) -> bool:
        return isinstance(target, ReportPort)

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "ReportDestination":
        if not cls.matches(target):
            raise ConfigurationError(f"report destination requires a report object, got {type(target).__name__}")
        return cls(target)

    @property
    def report(self) -> ReportPort:
        return self._report

    def _write(self, message: LogMessage) -> None:
        self._report.add_log(message)


class ArrayDestination(Destination):
    """Append every message, unmodified, to a collector or list.

    Examples
    --------
    >>> logs = []
    >>> destination = ArrayDestination(logs)
    >>> message = LogMessage(level="debug", text="x")
    >>> destination.emit(message).ok and logs[0] is message
    True
    """

    kind = "array"
    takes_target = True

    def __init__(self, messages: LogCollector | MutableSequence[LogMessage]) -> None:
        super().__init__(messages)
        self._messages = messages

    @classmethod
    def matches(cls, target: Any) -> bool:
        return isinstance(target, LogCollector)

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "ArrayDestination":
        if not isinstance(target, (LogCollector, MutableSequence)):
            raise ConfigurationError(f"array destination requires a LogCollector or list, got {type(target).__name__}")
        return cls(target)

    @property
    def messages(self) -> LogCollector | MutableSequence[LogMessage]:
        return self._messages

    def _write(self, message: LogMessage) -> None:
        self._messages.append(message)


__all__ = ["ArrayDestination", "ReportDestination"]
