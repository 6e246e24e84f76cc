from __future__ import annotations

import importlib.util
from types import SimpleNamespace
from typing import Any

import pytest

from lib_log_fanout.adapters.destinations import syslog as syslog_module
from lib_log_fanout.adapters.destinations.syslog import SyslogDestination, syslog_ident
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import ConfigurationError
from lib_log_fanout.domain.levels import Severity
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

_PRIORITIES = {f"LOG_{level.severity.upper()}": level.value for level in Severity}


class FakeSyslog(SimpleNamespace):
    def __init__(self) -> None:
        super().__init__(
            LOG_PID=0x01,
            LOG_NDELAY=0x08,
            LOG_DAEMON=3 << 3,
            LOG_LOCAL0=16 << 3,
            **_PRIORITIES,
        )
        self.calls: list[tuple[str, Any]] = []

    def openlog(self, ident: str, logoption: int, facility: int) -> None:
        self.calls.append(("openlog", (ident, logoption, facility)))

    def syslog(self, priority: int, message: str) -> None:
        self.calls.append(("syslog", (priority, message)))

    def closelog(self) -> None:
        self.calls.append(("closelog", None))


@pytest.fixture
def backend() -> FakeSyslog:
    return FakeSyslog()


def test_construction_reopens_syslog_with_pid_and_ndelay(backend: FakeSyslog) -> None:
    SyslogDestination(ident="puppet-agent", facility="local0", backend=backend)
    assert backend.calls == [("closelog", None), ("openlog", ("puppet-agent", 0x09, 16 << 3))]


def test_invalid_facility_is_a_configuration_error(backend: FakeSyslog) -> None:
    with pytest.raises(ConfigurationError, match="Invalid syslog facility bogus"):
        SyslogDestination(ident="puppet-agent", facility="bogus", backend=backend)


def test_messages_use_the_matching_priority_and_escape_percent(backend: FakeSyslog, message_factory) -> None:
    destination = SyslogDestination(ident="puppet-agent", backend=backend)
    destination.emit(message_factory("50% done", level="warning"))
    destination.emit(message_factory("ok", level="crit", source="mod%ule"))
    assert backend.calls[-2:] == [
        ("syslog", (Severity.WARNING.value, "50%% done")),
        ("syslog", (Severity.CRIT.value, "(module) ok")),
    ]


def test_close_calls_closelog_once(backend: FakeSyslog) -> None:
    destination = SyslogDestination(ident="puppet-agent", backend=backend)
    backend.calls.clear()
    destination.close()
    destination.close()
    assert backend.calls == [("closelog", None)]


@pytest.mark.parametrize(
    ("process_name", "expected"),
    [("agent", "puppet-agent"), ("puppetmasterd", "puppetmasterd"), ("apply", "puppet-apply")],
)
def test_syslog_ident(process_name: str, expected: str) -> None:
    assert syslog_ident(process_name) == expected


@pytest.mark.parametrize("facility", ["pid", "ndelay", "err", "debug"])
def test_non_facility_constants_are_rejected(backend: FakeSyslog, facility: str) -> None:
    with pytest.raises(ConfigurationError, match=f"Invalid syslog facility {facility}"):
        SyslogDestination(ident="puppet-agent", facility=facility, backend=backend)


def test_open_derives_ident_and_facility_from_settings(backend: FakeSyslog, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(syslog_module, "_default_backend", lambda: backend)
    destination = SyslogDestination.open(None, FanoutSettings(process_name="agent", syslog_facility="daemon"))
    assert backend.calls == [("closelog", None), ("openlog", ("puppet-agent", 0x09, 3 << 3))]
    assert destination.ident == "puppet-agent"
    assert destination.identity == ("syslog", None)


def test_suitable_follows_syslog_availability(monkeypatch: pytest.MonkeyPatch) -> None:
    assert SyslogDestination.suitable() is (importlib.util.find_spec("syslog") is not None)
    monkeypatch.setattr(importlib.util, "find_spec", lambda name: None)
    assert SyslogDestination.suitable() is False
