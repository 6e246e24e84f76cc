"""Shared fixtures for the fan-out test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO
from typing import Any, Callable, Iterator

import pytest
from rich.console import Console

from lib_log_fanout.adapters.destinations import create_default_registry
from lib_log_fanout.application.registry import DestinationRegistry
from lib_log_fanout.application.router import DestinationRouter
from lib_log_fanout.domain.message import LogMessage

_ENV_VARS = (
    "LOG_PROCESS_NAME",
    "LOG_SYSLOG_FACILITY",
    "LOG_AUTOFLUSH",
    "LOG_TRACE",
    "LOG_HOST_TIMEOUT",
    "LOG_FORCE_COLOR",
    "LOG_NO_COLOR",
    "LOG_DESTINATIONS",
    "LIB_LOG_FANOUT_USE_DOTENV",
)

FIXED_TIME = datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def message_factory() -> Callable[..., LogMessage]:
    """Return a factory building messages with a fixed timestamp."""

    def _factory(text: str = "hello", level: str = "notice", **overrides: Any) -> LogMessage:
        overrides.setdefault("time", FIXED_TIME)
        return LogMessage(level=level, text=text, **overrides)

    return _factory


@pytest.fixture
def record_console() -> Console:
    """Recording Rich console writing to an in-memory buffer."""

    return Console(file=StringIO(), record=True, force_terminal=False, color_system=None, width=200)


@pytest.fixture
def registry() -> DestinationRegistry:
    return create_default_registry()


@pytest.fixture
def router(registry: DestinationRegistry) -> Iterator[DestinationRouter]:
    instance = DestinationRouter(registry)
    yield instance
    instance.shutdown()
