from __future__ import annotations

import socket

import pytest

from dnsblast.domain.errors import StartupError
from dnsblast.infrastructure import endpoint as endpoint_module
from dnsblast.infrastructure.endpoint import open_endpoint, parse_server_address


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("127.0.0.1:53", ("127.0.0.1", 53)),
        ("192.0.2.10:5353", ("192.0.2.10", 5353)),
        ("[::1]:53", ("::1", 53)),
        ("[2001:db8::1]:8053", ("2001:db8::1", 8053)),
        ("8.8.8.8", ("8.8.8.8", 53)),
        ("::1", ("::1", 53)),
        (" 127.0.0.1:53 ", ("127.0.0.1", 53)),
    ],
)
def test_parse_server_address_accepts_socket_addresses(text: str, expected: tuple):
    assert parse_server_address(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "   ", "dns.google:53", "127.0.0.1:", "127.0.0.1:0", "127.0.0.1:65536", "127.0.0.1:dns"],
)
def test_parse_server_address_rejects_garbage(text: str):
    with pytest.raises(StartupError):
        parse_server_address(text)


def test_open_endpoint_binds_ephemeral_port_and_times_out():
    endpoint = open_endpoint(("127.0.0.1", 9))
    try:
        _, port = endpoint.local_address
        assert port > 0
        with pytest.raises(TimeoutError):
            endpoint.recv(0.05)
    finally:
        endpoint.close()


def test_open_endpoint_retries_then_raises_startup_error(monkeypatch):
    attempts: list[int] = []

    class _BrokenSocket:
        def __init__(self, family: int, kind: int) -> None:
            del family, kind

        def bind(self, address: tuple) -> None:
            attempts.append(1)
            raise OSError("address already in use")

        def connect(self, address: tuple) -> None:
            raise AssertionError("connect must not run after a failed bind")

        def close(self) -> None:
            return None

    monkeypatch.setattr(endpoint_module.socket, "socket", _BrokenSocket)
    with pytest.raises(StartupError, match="cannot bind a local endpoint"):
        open_endpoint(("127.0.0.1", 53))
    assert len(attempts) == 3


def test_endpoint_round_trip_over_loopback():
    peer = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    peer.bind(("127.0.0.1", 0))
    peer.settimeout(1.0)
    try:
        endpoint = open_endpoint(peer.getsockname())
        try:
            endpoint.send(b"ping")
            data, source = peer.recvfrom(64)
            assert data == b"ping"
            peer.sendto(b"pong", source)
            assert endpoint.recv(1.0) == b"pong"
        finally:
            endpoint.close()
    finally:
        peer.close()
