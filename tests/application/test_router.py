from __future__ import annotations

import logging
import threading
from typing import Any

import pytest

from lib_log_fanout.adapters.destinations import ArrayDestination
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.registry import DestinationRegistry
from lib_log_fanout.application.router import DIAGNOSTIC_EVENTS, DestinationRouter
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import DeliveryError, UnknownDestinationError
from lib_log_fanout.domain.levels import Severity
from lib_log_fanout.domain.message import LogMessage
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

CLOSE_ORDER: list[str] = []


class Recording(Destination):
    kind = "recording"

    def __init__(self) -> None:
        super().__init__()
        self.written: list[LogMessage] = []

    def _write(self, message: LogMessage) -> None:
        self.written.append(message)

    def _release(self) -> None:
        CLOSE_ORDER.append(self.kind)


class Second(Recording):
    kind = "second"


class Broken(Destination):
    kind = "broken"

    def _write(self, message: LogMessage) -> None:
        raise OSError("disk full")


class Remote(Recording):
    kind = "remote"
    deactivate_on_failure = True

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def _write(self, message: LogMessage) -> None:
        if self.fail:
            raise DeliveryError("collector unreachable")
        super()._write(message)


class StubbornClose(Recording):
    kind = "stubborn"

    def _release(self) -> None:
        raise OSError("cannot close")


class Named(Destination):
    kind = "named"
    takes_target = True

    @classmethod
    def matches(cls, target: Any) -> bool:
        return isinstance(target, str) and target.startswith("named:")

    def _write(self, message: LogMessage) -> None:
        return None


@pytest.fixture
def local_registry() -> DestinationRegistry:
    registry = DestinationRegistry()
    for destination_type in (Recording, Second, Broken, Remote, StubbornClose, Named):
        registry.register_type(destination_type)
    return registry


@pytest.fixture
def fallback_logs() -> list[LogMessage]:
    return []


@pytest.fixture
def events() -> list[tuple[str, dict[str, Any]]]:
    return []


@pytest.fixture
def local_router(local_registry, fallback_logs, events) -> DestinationRouter:
    CLOSE_ORDER.clear()
    return DestinationRouter(
        local_registry,
        fallback=ArrayDestination(fallback_logs),
        diagnostic=lambda name, payload: events.append((name, payload)),
    )


def test_dispatch_reaches_every_destination_in_activation_order(local_router, message_factory) -> None:
    first = local_router.activate("recording")
    second = local_router.activate("second")
    message = message_factory("applied")

    report = local_router.dispatch(message)

    assert first.written == [message] and second.written == [message]
    assert report.delivered == (("recording", None), ("second", None))
    assert report.ok


def test_dispatch_without_destinations_is_a_no_op(local_router, message_factory, fallback_logs) -> None:
    report = local_router.dispatch(message_factory())
    assert report.outcomes == ()
    assert fallback_logs == []


def test_failing_destination_does_not_block_the_others(local_router, message_factory, fallback_logs, events) -> None:
    local_router.activate("broken")
    healthy = local_router.activate("recording")
    message = message_factory("important", level="err")

    report = local_router.dispatch(message)

    assert healthy.written == [message]
    assert report.failed == (("broken", None),)
    assert "broken" in [identity[0] for identity in local_router.identities]
    assert fallback_logs[0].level is Severity.ERR
    assert fallback_logs[0].text == "Could not deliver to broken: disk full"
    assert fallback_logs[1] is message
    assert ("emit_failed", {"kind": "broken", "target": None, "level": "err", "exception": "OSError('disk full')", "deactivate": False}) in events


def test_failures_are_logged_through_the_module_logger(local_router, message_factory, caplog) -> None:
    local_router.activate("broken")
    with caplog.at_level(logging.ERROR, logger="lib_log_fanout.application.router"):
        local_router.dispatch(message_factory())
    assert "Could not deliver to broken: disk full" in caplog.text


def test_trace_setting_attaches_the_traceback(local_registry, fallback_logs, message_factory) -> None:
    router = DestinationRouter(local_registry, FanoutSettings(trace=True), fallback=ArrayDestination(fallback_logs))
    router.activate("broken")
    router.dispatch(message_factory())
    assert "Traceback" in fallback_logs[0].text
    assert "OSError: disk full" in fallback_logs[0].text


def test_self_deactivation_happens_after_the_fan_out(local_router, message_factory, events) -> None:
    remote = local_router.activate("remote")
    later = local_router.activate("recording")
    remote.fail = True

    first = message_factory("first")
    report = local_router.dispatch(first)

    assert later.written == [first]
    assert report.deactivated == (("remote", None),)
    assert ("remote", None) not in local_router.identities
    assert remote.closed
    assert ("destination_self_deactivated", {"kind": "remote", "target": None}) in events

    second = message_factory("second")
    follow_up = local_router.dispatch(second)
    assert later.written == [first, second]
    assert follow_up.delivered == (("recording", None),)


def test_activation_is_idempotent_per_identity(local_router) -> None:
    first = local_router.activate("recording")
    again = local_router.activate("recording")
    assert first is again
    assert len(local_router) == 1


def test_targets_resolve_implicitly(local_router) -> None:
    destination = local_router.activate("named:alpha")
    assert destination.identity == ("named", "named:alpha")
    assert local_router.activate("named", "named:alpha") is destination
    assert local_router.activate("named:beta") is not destination


def test_unknown_kinds_and_targets_are_rejected(local_router) -> None:
    with pytest.raises(UnknownDestinationError):
        local_router.activate("nonexistent", "x")
    with pytest.raises(UnknownDestinationError):
        local_router.activate("nothing-claims-this")
    assert len(local_router) == 0


@pytest.mark.parametrize(
    "ref_factory",
    [
        lambda destination: destination,
        lambda destination: destination.identity,
        lambda destination: "recording",
    ],
)
def test_deactivate_accepts_instance_identity_or_kind(local_router, ref_factory) -> None:
    destination = local_router.activate("recording")
    assert local_router.deactivate(ref_factory(destination)) is True
    assert destination.closed
    assert len(local_router) == 0


def test_deactivate_by_target_and_unknown_reference(local_router, events) -> None:
    local_router.activate("named:alpha")
    assert local_router.deactivate("named:alpha") is True
    assert local_router.deactivate("named:alpha") is False
    assert ("destination_deactivated", {"kind": "named", "target": "named:alpha"}) in events


def test_closed_destination_reports_failure_and_is_retired(local_router, message_factory) -> None:
    destination = local_router.activate("recording")
    destination.close()
    report = local_router.dispatch(message_factory())
    assert report.deactivated == (("recording", None),)
    assert len(local_router) == 0


def test_shutdown_closes_in_reverse_order_and_collects_errors(local_router) -> None:
    local_router.activate("recording")
    local_router.activate("stubborn")
    local_router.activate("second")

    errors = local_router.shutdown()

    assert CLOSE_ORDER == ["second", "recording"]
    assert [str(error) for error in errors] == ["cannot close"]
    assert len(local_router) == 0
    assert local_router.fallback.closed


def test_close_failures_reach_the_diagnostic_hook(local_router, events) -> None:
    local_router.activate("stubborn")
    local_router.deactivate("stubborn")
    assert any(name == "close_failed" for name, _ in events)


def test_diagnostic_hook_errors_are_contained(local_registry, message_factory) -> None:
    def explode(name: str, payload: dict[str, Any]) -> None:
        raise RuntimeError("hook failed")

    router = DestinationRouter(local_registry, diagnostic=explode)
    destination = router.activate("recording")
    router.dispatch(message_factory())
    assert len(destination.written) == 1


def test_diagnostic_event_names_are_stable(local_router, message_factory, events) -> None:
    local_router.activate("broken")
    local_router.dispatch(message_factory())
    local_router.shutdown()
    assert {name for name, _ in events} <= set(DIAGNOSTIC_EVENTS)


def test_concurrent_dispatch_delivers_every_message_once(local_router, message_factory) -> None:
    destination = local_router.activate("recording")
    messages = [message_factory(f"m{index}") for index in range(200)]
    chunks = [messages[offset::4] for offset in range(4)]

    def worker(chunk: list[LogMessage]) -> None:
        for message in chunk:
            local_router.dispatch(message)

    threads = [threading.Thread(target=worker, args=(chunk,)) for chunk in chunks]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(message.text for message in destination.written) == sorted(message.text for message in messages)


def test_concurrent_activation_and_dispatch_do_not_fail(local_router, message_factory, fallback_logs, caplog) -> None:
    stop = threading.Event()
    errors: list[BaseException] = []
    reports = []

    def churn() -> None:
        try:
            while not stop.is_set():
                local_router.activate("second")
                local_router.deactivate("second")
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    thread = threading.Thread(target=churn)
    thread.start()
    try:
        for index in range(200):
            reports.append(local_router.dispatch(message_factory(f"m{index}")))
    finally:
        stop.set()
        thread.join()
    assert errors == []
    assert all(report.ok for report in reports)
    assert fallback_logs == []
    assert "Could not deliver" not in caplog.text


def test_destination_deactivated_mid_dispatch_is_skipped_not_failed(
    local_router, local_registry, message_factory, fallback_logs, events, caplog
) -> None:
    class Evicting(Recording):
        kind = "evicting"

        def _write(self, message: LogMessage) -> None:
            super()._write(message)
            local_router.deactivate("second")

    local_registry.register_type(Evicting)
    local_router.activate("evicting")
    second = local_router.activate("second")

    with caplog.at_level(logging.ERROR, logger="lib_log_fanout.application.router"):
        report = local_router.dispatch(message_factory("racing"))

    assert second.closed
    assert report.failed == ()
    assert report.delivered == (("evicting", None), ("second", None))
    assert fallback_logs == []
    assert "Could not deliver" not in caplog.text
    assert "emit_failed" not in [name for name, _ in events]
