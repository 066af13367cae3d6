"""
Interfaces the dispatch/correlation engine depends on.

Workers only need something that can send one datagram and block for one
reply, plus a codec that turns names into request bytes and reply bytes into
a transaction ID. The concrete UDP socket and dnspython codec live in
``dnsblast.infrastructure``; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dnsblast.domain.models import RecordType, StatusEvent
from dnsblast.infrastructure.codec import DecodedReply


@runtime_checkable
class Endpoint(Protocol):
    """
    A network endpoint owned by exactly one worker.

    ``recv`` raises TimeoutError if no datagram arrives within ``timeout``
    seconds and OSError for any other transport failure.
    """

    def send(self, payload: bytes) -> int:
        ...

    def recv(self, timeout: float, bufsize: int = 4096) -> bytes:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class Codec(Protocol):
    def encode_query(self, domain: str, record: RecordType, txid: int) -> bytes:
        ...

    def decode_reply(self, payload: bytes) -> DecodedReply:
        """Decode ``payload`` or raise MalformedReplyError."""
        ...


class EventSink(Protocol):
    """Producer side of the event channel (``queue.SimpleQueue`` satisfies it)."""

    def put(self, item: StatusEvent) -> None:
        ...


class EventSource(Protocol):
    """Consumer side of the event channel."""

    def get(self) -> StatusEvent:
        ...


__all__ = ["Codec", "Endpoint", "EventSink", "EventSource"]
