from __future__ import annotations

import json
import logging
from urllib.parse import unquote_plus

import pytest

from lib_log_fanout.adapters.destinations import host as host_module
from lib_log_fanout.adapters.destinations.host import HostDestination
from lib_log_fanout.adapters.identity import StaticHostIdentity
from lib_log_fanout.application.ports.collector import CollectorPort
from lib_log_fanout.application.router import DestinationRouter
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.collector import LogCollector
from lib_log_fanout.domain.errors import ConfigurationError, DeliveryError, SerializationError
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


class FakeClient(CollectorPort):
    instances: list["FakeClient"] = []

    def __init__(self, host: str = "logs", port: int = 8140, *, timeout: float = 5.0) -> None:
        self.address = (host, port)
        self.timeout = timeout
        self.sent: list[str] = []
        self.fail = False
        self.refuse = False
        self.closed = False
        FakeClient.instances.append(self)

    def connect(self) -> None:
        if self.refuse:
            raise DeliveryError("connection refused")

    def send(self, payload: str) -> None:
        if self.fail:
            raise DeliveryError("connection reset")
        self.sent.append(payload)

    def close(self) -> None:
        self.closed = True


def _decode(payload: str) -> dict:
    return json.loads(unquote_plus(payload))


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def patched_host(monkeypatch: pytest.MonkeyPatch) -> type[FakeClient]:
    FakeClient.instances = []
    monkeypatch.setattr(host_module, "TcpCollectorClient", FakeClient)
    monkeypatch.setattr(host_module, "SocketHostIdentity", lambda: StaticHostIdentity("h", "d"))
    return FakeClient


def test_source_is_stamped_with_the_local_fqdn(client: FakeClient, message_factory) -> None:
    destination = HostDestination("logs", client=client, identity=StaticHostIdentity("h", "d"))
    message = message_factory("applied", source="X")

    assert destination.emit(message).ok

    payload = _decode(client.sent[0])
    assert payload["source"] == "h.d X"
    assert payload["text"] == "applied"
    assert message.source == "X"


def test_absolute_sources_are_joined_with_a_colon(client: FakeClient, message_factory) -> None:
    destination = HostDestination("logs", client=client, identity=StaticHostIdentity("h"))
    destination.emit(message_factory("changed", source="/etc/hosts"))
    assert _decode(client.sent[0])["source"] == "h:/etc/hosts"


def test_relayed_messages_and_plain_strings_are_skipped(client: FakeClient, message_factory) -> None:
    destination = HostDestination("logs", client=client, identity=StaticHostIdentity("h"))
    outcome = destination.emit(message_factory("from elsewhere", remote=True))
    assert outcome.ok and outcome.skipped
    assert destination.emit("just a string").skipped  # type: ignore[arg-type]
    assert client.sent == []


def test_serialization_failure_keeps_the_destination_active(client: FakeClient, message_factory) -> None:
    def broken(message) -> str:
        raise TypeError("not serialisable")

    destination = HostDestination("logs", client=client, identity=StaticHostIdentity("h"), serializer=broken)
    outcome = destination.emit(message_factory())
    assert not outcome.ok
    assert isinstance(outcome.error, SerializationError)
    assert "Could not dump" in str(outcome.error)
    assert outcome.deactivate is False


def test_delivery_failure_requests_deactivation(client: FakeClient, message_factory) -> None:
    client.fail = True
    destination = HostDestination("logs", client=client, identity=StaticHostIdentity("h"))
    outcome = destination.emit(message_factory())
    assert isinstance(outcome.error, DeliveryError)
    assert outcome.deactivate is True


def test_open_parses_the_endpoint_and_connects(patched_host, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="lib_log_fanout.adapters.destinations.host"):
        destination = HostDestination.open("collector.example.com:6514", FanoutSettings(host_timeout=2.5))
    client = patched_host.instances[0]
    assert client.address == ("collector.example.com", 6514)
    assert client.timeout == 2.5
    assert destination.identity == ("host", "collector.example.com:6514")
    assert "Treating collector.example.com:6514 as a hostname" in caplog.text


def test_open_requires_a_string_target() -> None:
    with pytest.raises(ConfigurationError):
        HostDestination.open(("logs", 8140), FanoutSettings())


def test_unreachable_collector_fails_activation(router: DestinationRouter, patched_host, monkeypatch) -> None:
    original_connect = FakeClient.connect

    def refuse(self: FakeClient) -> None:
        self.refuse = True
        original_connect(self)

    monkeypatch.setattr(FakeClient, "connect", refuse)
    with pytest.raises(DeliveryError):
        router.activate("host", "logs")
    assert len(router) == 0


def test_failing_host_retires_itself_without_blocking_others(router: DestinationRouter, patched_host, message_factory) -> None:
    host = router.activate("host", "logs")
    collected = LogCollector()
    router.activate(collected)
    client = patched_host.instances[0]
    client.fail = True

    report = router.dispatch(message_factory("first"))

    assert collected.texts() == ["first"]
    assert report.deactivated == (("host", "logs:8140"),)
    assert host.closed and client.closed
    assert router.identities == [("array", id(collected))]

    router.dispatch(message_factory("second"))
    assert collected.texts() == ["first", "second"]


def test_default_port_spelling_reuses_the_active_session(router: DestinationRouter, patched_host, message_factory) -> None:
    first = router.activate("host", "logs")
    again = router.activate("host", "logs:8140")

    router.dispatch(message_factory("once"))

    assert again is first
    assert router.identities == [("host", "logs:8140")]
    assert len(patched_host.instances) == 1
    assert len(patched_host.instances[0].sent) == 1


def test_host_deactivates_by_any_endpoint_spelling(router: DestinationRouter, patched_host) -> None:
    router.activate("host", "logs:8140")
    assert router.deactivate("logs") is True
    assert len(router) == 0
