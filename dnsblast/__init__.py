"""
dnsblast - concurrent DNS query load generator.

Fires a configurable volume of queries at a target resolver from parallel
workers, matches every reply to its request by transaction ID, and reports
live and final counts:

- sent / success / timeout / failed per query iteration
- completion percentage and elapsed time
- peak memory and CPU of the generator itself

Each worker owns one UDP endpoint; a single aggregator consumes the status
events of all workers from one channel.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from dnsblast.config import Settings, get_settings
from dnsblast.domain import (
    DomainPool,
    MismatchPolicy,
    RecordType,
    RunSummary,
    StartupError,
    Status,
    StatusEvent,
    WorkerConfig,
)
from dnsblast.engine import Aggregator, QueryWorker, TransactionIdAllocator
from dnsblast.orchestrator import RunConfig, run_load
from dnsblast.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Orchestration
    "RunConfig",
    "run_load",
    # Domain
    "DomainPool",
    "MismatchPolicy",
    "RecordType",
    "RunSummary",
    "StartupError",
    "Status",
    "StatusEvent",
    "WorkerConfig",
    # Engine
    "Aggregator",
    "QueryWorker",
    "TransactionIdAllocator",
    # Logging
    "configure_logging",
    "get_logger",
]
