"""
Loopback stub resolver for exercising dnsblast without a real DNS server.

Listens on a UDP port and answers every query according to a fixed mode:

- ``answer``: reply with a synthetic A/AAAA record and the query's ID
- ``silent``: never reply
- ``mismatch``: first send a reply with a foreign ID, then the real one
- ``garbage``: reply with bytes that do not decode as DNS

Used by the integration tests and handy for local smoke runs:

    python -m scripts.stub_resolver --port 5353 --mode answer
"""

from __future__ import annotations

import socket
import sys
import threading
from typing import Optional, Tuple

import dns.exception
import dns.message
import dns.rdatatype
import dns.rrset
import typer

MODES = ("answer", "silent", "mismatch", "garbage")

app = typer.Typer(help="Run a loopback DNS responder for dnsblast smoke tests.")


def _build_answer(query: dns.message.Message) -> dns.message.Message:
    response = dns.message.make_response(query)
    for question in query.question:
        if question.rdtype == dns.rdatatype.AAAA:
            rrset = dns.rrset.from_text(question.name, 60, "IN", "AAAA", "::1")
        else:
            rrset = dns.rrset.from_text(question.name, 60, "IN", "A", "127.0.0.1")
        response.answer.append(rrset)
    return response


class StubResolver:
    """
    Threaded UDP responder bound to ``host`` on an ephemeral (or given) port.

    Use as a context manager; ``address`` holds the bound (host, port).
    """

    def __init__(self, mode: str = "answer", host: str = "127.0.0.1", port: int = 0) -> None:
        if mode not in MODES:
            raise ValueError(f"unknown mode '{mode}'; expected one of {', '.join(MODES)}")
        self.mode = mode
        self.queries_seen = 0
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.bind((host, port))
        self._sock.settimeout(0.05)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self) -> Tuple[str, int]:
        return self._sock.getsockname()

    @property
    def server(self) -> str:
        host, port = self.address
        return f"{host}:{port}"

    def _reply(self, data: bytes, peer: Tuple[str, int]) -> None:
        if self.mode == "silent":
            return
        if self.mode == "garbage":
            self._sock.sendto(b"\x13\x37", peer)
            return

        try:
            query = dns.message.from_wire(data)
        except dns.exception.DNSException:
            return
        response = _build_answer(query)

        if self.mode == "mismatch":
            real_id = response.id
            response.id = (real_id + 1) % 65536
            self._sock.sendto(response.to_wire(), peer)
            response.id = real_id
        self._sock.sendto(response.to_wire(), peer)

    def serve_forever(self) -> None:
        while not self._stop.is_set():
            try:
                data, peer = self._sock.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError:
                if self._stop.is_set():
                    break
                continue
            self.queries_seen += 1
            self._reply(data, peer)

    def start(self) -> "StubResolver":
        self._thread = threading.Thread(target=self.serve_forever, name="stub-resolver", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
        self._sock.close()

    def __enter__(self) -> "StubResolver":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


@app.command()
def main(
    host: str = typer.Option("127.0.0.1", "--host", help="Address to bind."),
    port: int = typer.Option(5353, "--port", "-p", help="UDP port to bind."),
    mode: str = typer.Option("answer", "--mode", "-m", help=f"One of: {', '.join(MODES)}."),
) -> None:
    """
    Serve until interrupted.
    """
    resolver = StubResolver(mode=mode, host=host, port=port)
    typer.echo(f"Stub resolver ({mode}) listening on {resolver.server}")
    try:
        resolver.serve_forever()
    finally:
        resolver.stop()


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
