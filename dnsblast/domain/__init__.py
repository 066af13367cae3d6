"""
Domain package for dnsblast.

Exports the core value types shared by the engine, orchestrator and reporter.
Keep this package focused on data definitions and validation concerns.
"""

from dnsblast.domain.errors import StartupError
from dnsblast.domain.models import (
    TERMINAL_STATUSES,
    DomainPool,
    MismatchPolicy,
    RecordType,
    RunSummary,
    Status,
    StatusEvent,
    WorkerConfig,
)

__all__ = [
    "DomainPool",
    "MismatchPolicy",
    "RecordType",
    "RunSummary",
    "StartupError",
    "Status",
    "StatusEvent",
    "TERMINAL_STATUSES",
    "WorkerConfig",
]
