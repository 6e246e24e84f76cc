from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lib_log_fanout.application.router import DestinationRouter
from lib_log_fanout.application.use_cases.process_message import create_process_message
from lib_log_fanout.domain.collector import LogCollector
from lib_log_fanout.domain.levels import Severity
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


class FixedClock:
    def __init__(self, value: datetime) -> None:
        self.value = value

    def now(self) -> datetime:
        return self.value


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc))


def test_process_builds_and_dispatches_one_message(router: DestinationRouter, clock: FixedClock) -> None:
    collected = LogCollector()
    router.activate(collected)
    process = create_process_message(router=router, clock=clock)

    report = process(level="warning", text="slow disk", source="/dev/sda", multiline="slow\ndisk")

    assert report.ok
    message = collected.messages[0]
    assert message.level is Severity.WARNING
    assert message.source == "/dev/sda"
    assert message.time == clock.value
    assert message.rendered == "slow\ndisk"
    assert report.message is message


def test_process_rejects_unknown_levels(router: DestinationRouter, clock: FixedClock) -> None:
    process = create_process_message(router=router, clock=clock)
    with pytest.raises(ValueError):
        process(level="chatty", text="x")
