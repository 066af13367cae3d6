"""
UDP endpoint factory for dnsblast.

Each worker gets its own socket, bound to an ephemeral local port and
connected to the target resolver so that the kernel drops datagrams from
other peers. Binding is retried for transient failures using tenacity; a
bind that keeps failing is a startup error.
"""

from __future__ import annotations

import ipaddress
import socket
from typing import Tuple

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from dnsblast.domain.errors import StartupError
from dnsblast.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_DNS_PORT = 53

ServerAddress = Tuple[str, int]


def parse_server_address(text: str) -> ServerAddress:
    """
    Parse ``ip:port`` or ``[ipv6]:port`` into a (host, port) tuple.

    A bare IP address is accepted and targets port 53.

    Raises
    ------
    StartupError
        If the host is not an IP literal or the port is out of range.
    """
    value = (text or "").strip()
    if not value:
        raise StartupError("server address is empty")

    try:
        return str(ipaddress.ip_address(value)), DEFAULT_DNS_PORT
    except ValueError:
        pass

    host, sep, port_text = value.rpartition(":")
    if not sep:
        raise StartupError(f"invalid server address '{text}'")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        address = ipaddress.ip_address(host)
        port = int(port_text)
    except ValueError as exc:
        raise StartupError(f"invalid server address '{text}': {exc}") from exc
    if not 0 < port < 65536:
        raise StartupError(f"invalid server address '{text}': port out of range")

    return str(address), port


class UdpEndpoint:
    """A connected datagram socket owned by exactly one worker."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    @property
    def local_address(self) -> Tuple:
        return self._sock.getsockname()

    def send(self, payload: bytes) -> int:
        return self._sock.send(payload)

    def recv(self, timeout: float, bufsize: int = 4096) -> bytes:
        """
        Block for one datagram.

        Raises TimeoutError when nothing arrives within ``timeout`` seconds,
        and OSError for any other transport failure (e.g. ICMP port
        unreachable surfacing as ConnectionRefusedError).
        """
        self._sock.settimeout(timeout)
        return self._sock.recv(bufsize)

    def close(self) -> None:
        self._sock.close()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)
def _bind_connected_socket(server: ServerAddress) -> socket.socket:
    host, _ = server
    if ipaddress.ip_address(host).version == 6:
        sock = socket.socket(socket.AF_INET6, socket.SOCK_DGRAM)
        wildcard = "::"
    else:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        wildcard = "0.0.0.0"
    try:
        sock.bind((wildcard, 0))
        sock.connect(server)
    except OSError:
        sock.close()
        raise
    return sock


def open_endpoint(server: ServerAddress) -> UdpEndpoint:
    """
    Create a dedicated endpoint connected to ``server``.

    Retries up to 3 times with exponential backoff for transient bind or
    connect errors.

    Raises
    ------
    StartupError
        If the socket cannot be bound after all retry attempts.
    """
    try:
        sock = _bind_connected_socket(server)
    except OSError as exc:
        raise StartupError(f"cannot bind a local endpoint for {server[0]}:{server[1]}: {exc}") from exc

    endpoint = UdpEndpoint(sock)
    log.debug(
        "Endpoint bound",
        extra={"local": str(endpoint.local_address), "server": f"{server[0]}:{server[1]}"},
    )
    return endpoint


__all__ = [
    "DEFAULT_DNS_PORT",
    "ServerAddress",
    "UdpEndpoint",
    "open_endpoint",
    "parse_server_address",
]
