"""Alternate console rendering splitting errors onto stderr.

Error-class severities go to stderr as ``"<Label>: <text>"`` in bold bright
red; ``info`` and ``debug`` go to stdout behind a coloured ``Info``/``Debug``
label; any other level is printed raw. Multi-line renderings are preferred
when the message carries one.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.text import Text

from lib_log_fanout.adapters.console.rich_console import build_console
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import LogMessage

_ERROR_STYLE = "bold bright_red"
_LABEL_STYLES = {
    Severity.INFO: "green",
    Severity.DEBUG: "cyan",
}


class PrototypeConsoleDestination(Destination):
    """Console kind with its own formatting policy, coexisting with ``console``."""

    kind = "prototype_console"

    def __init__(
        self,
        *,
        out: Console | None = None,
        err: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
    ) -> None:
        super().__init__()
        self._out = out if out is not None else build_console(force_color=force_color, no_color=no_color)
        self._err = err if err is not None else build_console(stderr=True, force_color=force_color, no_color=no_color)

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "PrototypeConsoleDestination":
        return cls(force_color=settings.force_color, no_color=settings.no_color)

    @staticmethod
    def render(message: LogMessage) -> tuple[bool, Text]:
        """Return ``(to_stderr, text)`` for ``message``.

        Examples
        --------
        >>> to_err, text = PrototypeConsoleDestination.render(LogMessage(level="crit", text="gone"))
        >>> to_err, text.plain
        (True, 'Critical: gone')
        >>> PrototypeConsoleDestination.render(LogMessage(level="notice", text="raw"))[1].plain
        'raw'
        """

        body = message.rendered
        level = message.level
        if level.is_error:
            return True, Text(f"{level.label}: {body}", style=_ERROR_STYLE)
        label_style = _LABEL_STYLES.get(level)
        if label_style is not None:
            return False, Text.assemble((level.label, label_style), f": {body}")
        return False, Text(body)

    def _write(self, message: LogMessage) -> None:
        to_stderr, text = self.render(message)
        console = self._err if to_stderr else self._out
        console.print(text, highlight=False, soft_wrap=True)

    def _flush(self) -> None:
        self._out.file.flush()
        self._err.file.flush()


__all__ = ["PrototypeConsoleDestination"]
