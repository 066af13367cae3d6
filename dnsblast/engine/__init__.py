"""
Engine package for dnsblast.

This module re-exports the dispatch/correlation pieces (allocator, worker,
aggregator) and the interfaces they depend on so downstream code can import
from `dnsblast.engine` directly.
"""

from dnsblast.engine.abstract import Codec, Endpoint, EventSink, EventSource
from dnsblast.engine.aggregator import Aggregator, Counters
from dnsblast.engine.allocator import TXID_MODULUS, TransactionIdAllocator
from dnsblast.engine.worker import QueryWorker

__all__ = [
    # Interfaces
    "Codec",
    "Endpoint",
    "EventSink",
    "EventSource",
    # Engine
    "Aggregator",
    "Counters",
    "QueryWorker",
    "TXID_MODULUS",
    "TransactionIdAllocator",
]
