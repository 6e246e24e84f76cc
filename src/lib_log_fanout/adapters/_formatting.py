"""Text renderings shared by the destination adapters.

Why
---
The file, console, syslog, and event-log destinations each own one line
format. Keeping them here lets tests pin the exact byte layout without
constructing backends.

Contents
--------
* :func:`format_file_line` - ``"<time> <source> (<level>): <text>\\n"``.
* :func:`format_console_line` - ``"<level>: [<source>: ]<text>"``.
* :func:`escape_percent` / :func:`format_syslog_line` - syslog-safe text.
* :func:`format_eventlog_data` - event-log data string.
"""

from __future__ import annotations

from lib_log_fanout.domain.message import LogMessage


def format_file_line(message: LogMessage) -> str:
    """Return the newline-terminated file rendering of ``message``.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> msg = LogMessage(level="err", text="disk full", time=datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
    >>> format_file_line(msg)
    '2025-01-02T03:04:05+00:00 Puppet (err): disk full\\n'
    """

    return f"{message.time.isoformat()} {message.source} ({message.level.severity}): {message.text}\n"


def format_console_line(message: LogMessage) -> str:
    """Return the console rendering, naming the source unless it is the system.

    Examples
    --------
    >>> format_console_line(LogMessage(level="info", text="ready"))
    'info: ready'
    >>> format_console_line(LogMessage(level="warning", text="slow", source="db"))
    'warning: db: slow'
    """

    if message.from_system:
        return f"{message.level.severity}: {message.text}"
    return f"{message.level.severity}: {message.source}: {message.text}"


def escape_percent(text: str) -> str:
    """Double every ``%`` so the text is never read as a format string.

    Examples
    --------
    >>> escape_percent("100% done, 5%s")
    '100%% done, 5%%s'
    """

    return text.replace("%", "%%")


def format_syslog_line(message: LogMessage) -> str:
    """Return the syslog payload; ``%`` is doubled in text and dropped from sources.

    Examples
    --------
    >>> format_syslog_line(LogMessage(level="info", text="50% done"))
    '50%% done'
    >>> format_syslog_line(LogMessage(level="info", text="ok", source="mod%ule"))
    '(module) ok'
    """

    if message.from_system:
        return escape_percent(message.text)
    return f"({message.source.replace('%', '')}) {escape_percent(message.text)}"


def format_eventlog_data(message: LogMessage) -> str:
    """Return the event-log data string, prefixed with non-system sources."""

    prefix = f"{message.source}: " if message.source and not message.from_system else ""
    return prefix + message.text


__all__ = [
    "escape_percent",
    "format_console_line",
    "format_eventlog_data",
    "format_file_line",
    "format_syslog_line",
]
