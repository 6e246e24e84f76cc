"""Optional ``.env`` loading shared by the CLI and host applications.

``python-dotenv`` locates the nearest ``.env`` walking upwards from the
current working directory. Values already present in the environment always
win; the file only fills gaps.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "LIB_LOG_FANOUT_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)

_LOADED_PATH: Path | None = None
_LOADED = False
_LOCK = Lock()


def should_use_dotenv(explicit: bool | None = None) -> bool:
    """Return whether ``.env`` loading is requested.

    An explicit flag wins over :data:`DOTENV_ENV_VAR`.

    Examples
    --------
    >>> should_use_dotenv(explicit=False)
    False
    """

    if explicit is not None:
        return explicit
    return os.getenv(DOTENV_ENV_VAR, "").strip().lower() in _TRUTHY


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` once per process and return its path.

    Returns ``None`` when no file was found.
    """

    global _LOADED, _LOADED_PATH
    with _LOCK:
        if _LOADED:
            return _LOADED_PATH
        if search_from is not None:
            candidate = _search_upwards(search_from)
        else:
            found = find_dotenv(usecwd=True)
            candidate = Path(found).resolve() if found else None
        if candidate is not None:
            load_dotenv(candidate, override=False)
            logger.debug("Loaded environment defaults from %s", candidate)
        _LOADED = True
        _LOADED_PATH = candidate
        return candidate


def _search_upwards(start: Path) -> Path | None:
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _LOADED, _LOADED_PATH
    with _LOCK:
        _LOADED = False
        _LOADED_PATH = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
