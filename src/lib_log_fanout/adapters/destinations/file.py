"""Append-only file destination.

Purpose
-------
Write one line per message to a log file, creating its directory on demand and
never truncating existing content.

Contents
--------
* :class:`FileDestination` - claims absolute filesystem paths.

System Role
-----------
Default sink for daemons writing to ``/var/log``-style paths; the line format
lives in :func:`lib_log_fanout.adapters._formatting.format_file_line`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Hashable
from pathlib import Path
from typing import IO, Any

from lib_log_fanout.adapters._formatting import format_file_line
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import ConfigurationError
from lib_log_fanout.domain.message import LogMessage

logger = logging.getLogger(__name__)

_DIRECTORY_MODE = 0o755


class FileDestination(Destination):
    """Append formatted lines to the file at ``path``.

    Attributes
    ----------
    autoflush:
        When ``True`` the file is flushed after every line.
    """

    kind = "file"
    takes_target = True

    def __init__(self, path: str | os.PathLike[str], *, autoflush: bool = False) -> None:
        super().__init__(os.fspath(path))
        self.autoflush = autoflush
        self._path = Path(path)
        directory = self._path.parent
        if not directory.exists():
            directory.mkdir(mode=_DIRECTORY_MODE, parents=True, exist_ok=True)
            logger.info("Creating log directory %s", directory)
        self._file: IO[str] | None = self._path.open("a", encoding="utf-8")

    @classmethod
    def matches(cls, target: Any) -> bool:
        return isinstance(target, (str, os.PathLike)) and os.path.isabs(os.fspath(target))

    @classmethod
    def identity_key(cls, target: Any) -> Hashable:
        if isinstance(target, (str, os.PathLike)):
            return os.path.normpath(os.path.abspath(os.fspath(target)))
        return super().identity_key(target)

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "FileDestination":
        if not cls.matches(target):
            raise ConfigurationError(f"file destination requires an absolute path, got {target!r}")
        return cls(target, autoflush=settings.autoflush)

    @property
    def path(self) -> Path:
        return self._path

    def _write(self, message: LogMessage) -> None:
        assert self._file is not None
        self._file.write(format_file_line(message))
        if self.autoflush:
            self._file.flush()

    def _flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def _release(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


__all__ = ["FileDestination"]
