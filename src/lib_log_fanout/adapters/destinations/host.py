"""Destination forwarding messages to a remote log collector.

Purpose
-------
Relay locally produced messages to a central collector, stamping the source
with the local host name so the collector can tell senders apart.

Contents
--------
* :func:`stamp_source` - compute the rewritten source for one message.
* :func:`serialize_message` - URL-quoted JSON wire payload.
* :class:`HostDestination` - ``host[:port]`` targets, self-deactivating on
  delivery failure.

System Role
-----------
The only destination whose failures are persistent by nature: a single
delivery failure retires it (the router closes it after the fan-out pass) so
later messages do not keep failing against a dead collector.

Alignment Notes
---------------
Relayed messages (``remote=True``) and plain strings are never forwarded, which
prevents loops between collectors and double stamping of sources.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Hashable
from typing import Any
from urllib.parse import quote_plus

from lib_log_fanout.adapters.identity import SocketHostIdentity
from lib_log_fanout.adapters.network.collector_client import TcpCollectorClient, parse_endpoint
from lib_log_fanout.application.ports.collector import CollectorPort
from lib_log_fanout.application.ports.destination import Destination
from lib_log_fanout.application.ports.identity import HostIdentityPort
from lib_log_fanout.application.settings import FanoutSettings
from lib_log_fanout.domain.errors import ConfigurationError, SerializationError
from lib_log_fanout.domain.message import LogMessage
from lib_log_fanout.domain.outcome import EmitOutcome

logger = logging.getLogger(__name__)

Serializer = Callable[[LogMessage], str]


def serialize_message(message: LogMessage) -> str:
    """Return the URL-quoted JSON payload for ``message``.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> msg = LogMessage(level="info", text="a b", time=datetime(2025, 1, 1, tzinfo=timezone.utc))
    >>> serialize_message(msg).startswith("%7B%22level%22%3A+%22info%22")
    True
    """

    return quote_plus(message.to_json())


def stamp_source(source: str, fqdn: str) -> str:
    """Prefix ``source`` with the local host name.

    Examples
    --------
    >>> stamp_source("Puppet", "web01.example.com")
    'web01.example.com Puppet'
    >>> stamp_source("/etc/hosts", "web01")
    'web01:/etc/hosts'
    """

    if os.path.isabs(source):
        return f"{fqdn}:{source}"
    return f"{fqdn} {source}"


class HostDestination(Destination):
    """Send every local message to the collector at ``host[:port]``."""

    kind = "host"
    takes_target = True
    deactivate_on_failure = True

    def __init__(
        self,
        target: str,
        *,
        client: CollectorPort,
        identity: HostIdentityPort | None = None,
        serializer: Serializer = serialize_message,
    ) -> None:
        super().__init__(target)
        self._client = client
        self._identity = identity if identity is not None else SocketHostIdentity()
        self._serializer = serializer
        self._fqdn: str | None = None

    @classmethod
    def identity_key(cls, target: Any) -> Hashable:
        """Key ``host`` and ``host:8140`` alike.

        >>> HostDestination.identity_key("logs")
        'logs:8140'
        """

        if isinstance(target, str):
            return "%s:%d" % parse_endpoint(target)
        return super().identity_key(target)

    @classmethod
    def open(cls, target: Any, settings: FanoutSettings) -> "HostDestination":
        if not isinstance(target, str):
            raise ConfigurationError(f"host destination requires a 'host[:port]' string, got {target!r}")
        logger.info("Treating %s as a hostname", target)
        host, port = parse_endpoint(target)
        client = TcpCollectorClient(host, port, timeout=settings.host_timeout)
        client.connect()
        return cls(target, client=client)

    @property
    def fqdn(self) -> str:
        """Return ``hostname[.domain]``, looked up once and cached."""

        if self._fqdn is None:
            hostname = self._identity.hostname()
            domain = self._identity.domain()
            self._fqdn = f"{hostname}.{domain}" if domain else hostname
        return self._fqdn

    def rewrite(self, message: LogMessage) -> LogMessage:
        """Return a private copy of ``message`` with the stamped source."""

        return message.with_source(stamp_source(message.source, self.fqdn))

    def _write(self, message: LogMessage | str) -> EmitOutcome | None:
        if isinstance(message, str) or message.remote:
            return EmitOutcome.skip()
        stamped = self.rewrite(message)
        try:
            payload = self._serializer(stamped)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Could not dump message for {self.describe()}: {exc}") from exc
        self._client.send(payload)
        return None

    def _release(self) -> None:
        self._client.close()


__all__ = ["HostDestination", "serialize_message", "stamp_source"]
