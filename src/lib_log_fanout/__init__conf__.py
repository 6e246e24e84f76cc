"""Static package metadata surfaced to CLI commands and documentation.

Keep these values in sync with ``pyproject.toml``.
"""

from __future__ import annotations

from typing import Callable

name = "lib_log_fanout"
title = "Pluggable multi-destination log fan-out"
version = "0.1.0"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_fanout"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Write the metadata banner through ``writer`` (``print`` by default).

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_fanout:\\n\\n'
    """

    emit = writer if writer is not None else (lambda text: print(text, end=""))
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    emit(f"Info for {name}:\n\n")
    for label, value in fields:
        emit(f"    {label:<{pad}} = {value}\n")


def summary_info() -> str:
    """Return the metadata banner as a single string.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """

    lines: list[str] = []
    print_info(writer=lines.append)
    return "".join(lines)


__all__ = ["print_info", "summary_info"]
