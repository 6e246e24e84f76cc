"""TCP client delivering serialised messages to a remote log collector.

Purpose
-------
Provide the remote-send primitive behind the ``host`` destination: one
newline-terminated payload per message over a persistent TCP session, with
every connect and send bounded by a timeout.

Contents
--------
* :data:`DEFAULT_PORT` - collector port used when the target omits one.
* :func:`parse_endpoint` - split ``host[:port]`` targets.
* :class:`TcpCollectorClient` - :class:`CollectorPort` implementation.
"""

from __future__ import annotations

import logging
import re
import socket

from lib_log_fanout.application.ports.collector import CollectorPort
from lib_log_fanout.domain.errors import ConfigurationError, DeliveryError

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 8140

_PORT_PATTERN = re.compile(r":(\d+)")


def parse_endpoint(target: str, *, default_port: int = DEFAULT_PORT) -> tuple[str, int]:
    """Split ``target`` into ``(host, port)``.

    Examples
    --------
    >>> parse_endpoint("logs.example.com:6514")
    ('logs.example.com', 6514)
    >>> parse_endpoint("logs.example.com")
    ('logs.example.com', 8140)
    """

    text = target.strip()
    match = _PORT_PATTERN.search(text)
    if match is None:
        host, port = text, default_port
    else:
        host, port = _PORT_PATTERN.sub("", text, count=1), int(match.group(1))
    if not host:
        raise ConfigurationError(f"host destination requires a host name, got {target!r}")
    if not 0 < port < 65536:
        raise ConfigurationError(f"collector port must be between 1 and 65535, got {port}")
    return host, port


class TcpCollectorClient(CollectorPort):
    """Send payloads to ``host:port`` over a reusable TCP connection."""

    def __init__(self, host: str, port: int = DEFAULT_PORT, *, timeout: float = 5.0) -> None:
        if timeout <= 0:
            raise ConfigurationError("collector timeout must be positive")
        self._host = host
        self._port = port
        self._timeout = timeout
        self._socket: socket.socket | None = None

    @property
    def address(self) -> tuple[str, int]:
        return (self._host, self._port)

    def connect(self) -> None:
        if self._socket is not None:
            return
        try:
            self._socket = socket.create_connection(self.address, timeout=self._timeout)
        except OSError as exc:
            raise DeliveryError(f"cannot reach log collector {self._host}:{self._port}: {exc}") from exc
        self._socket.settimeout(self._timeout)

    def send(self, payload: str) -> None:
        data = payload.encode("utf-8") + b"\n"
        reused = self._socket is not None
        self.connect()
        try:
            self._sendall(data)
        except OSError as exc:
            self.close()
            if not reused:
                raise DeliveryError(f"sending to log collector {self._host}:{self._port} failed: {exc}") from exc
            # The collector may have dropped an idle session; try one fresh connection.
            LOGGER.debug("Reconnecting to log collector %s:%s after %r", self._host, self._port, exc)
            self.connect()
            try:
                self._sendall(data)
            except OSError as retry_exc:
                self.close()
                raise DeliveryError(
                    f"sending to log collector {self._host}:{self._port} failed: {retry_exc}"
                ) from retry_exc

    def close(self) -> None:
        connection, self._socket = self._socket, None
        if connection is None:
            return
        try:
            connection.close()
        except OSError:  # pragma: no cover - close on a broken socket
            LOGGER.debug("Ignoring error while closing collector connection", exc_info=True)

    def _sendall(self, data: bytes) -> None:
        assert self._socket is not None
        self._socket.sendall(data)


__all__ = ["DEFAULT_PORT", "TcpCollectorClient", "parse_endpoint"]
