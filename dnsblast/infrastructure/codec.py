"""
DNS wire codec backed by dnspython.

The engine treats this as opaque: it hands over (domain, record type,
transaction ID) and gets request bytes back, and it hands over reply bytes
and gets a DecodedReply or a MalformedReplyError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import dns.exception
import dns.message
import dns.rdatatype

from dnsblast.domain.models import RecordType


class MalformedReplyError(ValueError):
    """Reply payload could not be decoded as a DNS message."""


class QueryEncodingError(ValueError):
    """A query could not be rendered to wire format."""


@dataclass(frozen=True)
class DecodedReply:
    txid: int
    questions: Tuple[str, ...]
    answers: Tuple[str, ...]


class DnsCodec:
    """Build recursive IN-class queries and decode replies."""

    def encode_query(self, domain: str, record: RecordType, txid: int) -> bytes:
        try:
            query = dns.message.make_query(domain, dns.rdatatype.from_text(record.value))
            query.id = txid
            return query.to_wire()
        except dns.exception.DNSException as exc:
            raise QueryEncodingError(f"cannot encode query for '{domain}': {exc}") from exc

    def decode_reply(self, payload: bytes) -> DecodedReply:
        try:
            message = dns.message.from_wire(payload)
        except (dns.exception.DNSException, ValueError) as exc:
            raise MalformedReplyError(f"undecodable reply ({len(payload)} bytes): {exc}") from exc

        return DecodedReply(
            txid=message.id,
            questions=tuple(rrset.name.to_text() for rrset in message.question),
            answers=tuple(rrset.to_text() for rrset in message.answer),
        )


__all__ = ["DecodedReply", "DnsCodec", "MalformedReplyError", "QueryEncodingError"]
