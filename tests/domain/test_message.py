from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import SYSTEM_SOURCE, LogMessage
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_defaults_name_the_system_as_source() -> None:
    message = LogMessage(level="info", text="hello")
    assert message.source == SYSTEM_SOURCE
    assert message.from_system
    assert message.remote is False
    assert message.time.tzinfo is not None


def test_time_is_normalised_to_utc() -> None:
    local = datetime(2025, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    message = LogMessage(level="info", text="x", time=local)
    assert message.time == datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert message.time.utcoffset() == timedelta(0)


def test_naive_time_is_rejected() -> None:
    with pytest.raises(ValueError, match="timezone-aware"):
        LogMessage(level="info", text="x", time=datetime(2025, 1, 1))


def test_text_must_be_a_string() -> None:
    with pytest.raises(TypeError):
        LogMessage(level="info", text=42)  # type: ignore[arg-type]


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        LogMessage(level="loud", text="x")


def test_non_string_level_is_a_type_error() -> None:
    with pytest.raises(TypeError, match="log level must be a Severity or a level name, got int"):
        LogMessage(level=3, text="x")  # type: ignore[arg-type]


def test_with_source_returns_a_private_copy(message_factory) -> None:
    original = message_factory(source="svc")
    copy = original.with_source("web01 svc")
    assert original.source == "svc"
    assert copy.source == "web01 svc"
    assert copy.text == original.text and copy.time == original.time


def test_messages_are_immutable(message_factory) -> None:
    message = message_factory()
    with pytest.raises(AttributeError):
        message.text = "changed"  # type: ignore[misc]


def test_rendered_prefers_multiline(message_factory) -> None:
    assert message_factory(text="short").rendered == "short"
    assert message_factory(text="short", multiline="line one\nline two").rendered == "line one\nline two"


def test_dict_round_trip_preserves_fields(message_factory) -> None:
    message = message_factory(text="applied", level="warning", source="/etc/hosts", remote=True)
    payload = message.to_dict()
    assert payload["level"] == "warning"
    assert payload["time"] == "2025-09-30T12:00:00+00:00"
    assert "multiline" not in payload
    assert LogMessage.from_dict(payload) == message


def test_to_json_is_deterministic(message_factory) -> None:
    message = message_factory(text="x", level=Severity.ERR)
    assert message.to_json() == message.to_json()
    assert message.to_json().startswith('{"level": "err"')
