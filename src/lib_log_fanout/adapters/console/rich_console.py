"""Rich-powered console destination.

Purpose
-------
Render messages on the terminal as ``"<level>: <text>"`` (or
``"<level>: <source>: <text>"`` for non-system sources), coloured per level.

Contents
--------
* :data:`_STYLE_MAP` - default level-to-style mapping.
* :class:`ConsoleDestination` - singleton console sink, also used as the
  router's fallback channel on stderr.

System Role
-----------
Primary human-facing sink; honours colour overrides from
:class:`~lib_log_fanout.application.settings.FanoutSettings`.
"""

from __future__ import annotations

import io
import sys
from typing import Any, Mapping, MutableMapping, TextIO

from rich.console import Console

from lib_log_fanout.adapters._formatting import format_console_line
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import LogMessage

#: Default Rich styles keyed by :class:`Severity`.
_STYLE_MAP: Mapping[Severity, str] = {
    Severity.DEBUG: "cyan",
    Severity.INFO: "green",
    Severity.NOTICE: "",
    Severity.WARNING: "yellow",
    Severity.ERR: "bright_magenta",
    Severity.ALERT: "bright_red",
    Severity.EMERG: "bright_red",
    Severity.CRIT: "bright_red",
}


def line_buffered(stream: TextIO) -> None:
    """Switch ``stream`` to line buffering so every message is flushed."""

    reconfigure = getattr(stream, "reconfigure", None)
    if not callable(reconfigure):
        return
    try:
        reconfigure(line_buffering=True)
    except (ValueError, io.UnsupportedOperation):  # pragma: no cover - detached or exotic streams
        return


def build_console(*, stderr: bool = False, force_color: bool = False, no_color: bool = False) -> Console:
    """Return a Rich console bound to stdout/stderr with line buffering enabled."""

    line_buffered(sys.stderr if stderr else sys.stdout)
    return Console(stderr=stderr, force_terminal=True if force_color else None, no_color=no_color)


class ConsoleDestination(Destination):
    """Print messages using Rich with per-level colours."""

    kind = "console"

    def __init__(
        self,
        *,
        console: Console | None = None,
        stderr: bool = False,
        force_color: bool = False,
        no_color: bool = False,
        colorize: bool = True,
        styles: MutableMapping[Severity | str, str] | None = None,
    ) -> None:
        super().__init__()
        self._console = console if console is not None else build_console(stderr=stderr, force_color=force_color, no_color=no_color)
        self._colorize = colorize and not no_color
        merged = dict(_STYLE_MAP)
        for key, value in (styles or {}).items():
            merged[Severity.coerce(key)] = value
        self._style_map = merged

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "ConsoleDestination":
        return cls(force_color=settings.force_color, no_color=settings.no_color)

    @property
    def console(self) -> Console:
        return self._console

    def style_for(self, level: Severity) -> str:
        return self._style_map.get(level, "") if self._colorize else ""

    def _write(self, message: LogMessage) -> None:
        """Print ``message`` on the bound console.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> destination = ConsoleDestination(console=console)
        >>> destination.emit(LogMessage(level="info", text="ready")).ok
        True
        >>> console.export_text()
        'info: ready\\n'
        """

        self._console.print(
            format_console_line(message),
            style=self.style_for(message.level),
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def _flush(self) -> None:
        self._console.file.flush()


__all__ = ["ConsoleDestination", "build_console", "line_buffered"]
