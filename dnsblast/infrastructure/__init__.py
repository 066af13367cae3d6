"""
Infrastructure package for dnsblast.

Centralizes I/O concerns: the domain list loader, the DNS wire codec, and the
UDP endpoint factory. Keep this layer focused on I/O and resource management,
decoupled from the dispatch/correlation engine.
"""

from dnsblast.infrastructure.codec import DecodedReply, DnsCodec, MalformedReplyError
from dnsblast.infrastructure.domain_file import is_valid_domain, parse_domains, read_domains
from dnsblast.infrastructure.endpoint import UdpEndpoint, open_endpoint, parse_server_address

__all__ = [
    "DecodedReply",
    "DnsCodec",
    "MalformedReplyError",
    "UdpEndpoint",
    "is_valid_domain",
    "open_endpoint",
    "parse_domains",
    "parse_server_address",
    "read_domains",
]
