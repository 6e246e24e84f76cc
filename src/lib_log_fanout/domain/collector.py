"""In-memory message collector used as the ``array`` destination target."""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import Iterator

from .message import LogMessage


class LogCollector:
    """Collect raw :class:`LogMessage` objects for deterministic assertions.

    The collector wraps an optional caller-owned list so tests can keep a
    reference to the underlying storage.

    Examples
    --------
    >>> logs = []
    >>> collector = LogCollector(logs)
    >>> collector.append(LogMessage(level="info", text="hi"))
    >>> len(collector), logs[0].text
    (1, 'hi')
    """

    def __init__(self, logs: MutableSequence[LogMessage] | None = None) -> None:
        self._logs: MutableSequence[LogMessage] = logs if logs is not None else []

    def append(self, message: LogMessage) -> None:
        self._logs.append(message)

    def __lshift__(self, message: LogMessage) -> "LogCollector":
        self.append(message)
        return self

    @property
    def messages(self) -> list[LogMessage]:
        """Return a copy of the collected messages."""

        return list(self._logs)

    def texts(self) -> list[str]:
        return [message.text for message in self._logs]

    def clear(self) -> None:
        del self._logs[:]

    def __iter__(self) -> Iterator[LogMessage]:
        return iter(self._logs)

    def __len__(self) -> int:
        return len(self._logs)

    def __repr__(self) -> str:
        return f"LogCollector({len(self._logs)} messages)"


__all__ = ["LogCollector"]
