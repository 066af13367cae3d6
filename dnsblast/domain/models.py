"""
Domain models for dnsblast.

Defines the values that flow between the load-generation engine and its
collaborators: the record types a worker may query, the status events a
worker reports, the per-worker configuration fixed at spawn time, the shared
domain pool, and the summary produced at the end of a run.
"""
from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, TypedDict

from pydantic import BaseModel, Field


class RecordType(str, enum.Enum):
    """Query record types accepted by the load generator."""

    A = "A"
    AAAA = "AAAA"


class MismatchPolicy(str, enum.Enum):
    """
    How a worker budgets its wait when a reply carries the wrong transaction ID.

    ``deadline`` keeps a single deadline per iteration and only waits for the
    time that is left. ``reset`` restarts the full timeout after every
    mismatched reply.
    """

    DEADLINE = "deadline"
    RESET = "reset"


class Status(str, enum.Enum):
    SENT = "sent"
    SUCCESS = "success"
    TIMEOUT = "timeout"
    FAILED = "failed"
    WORKER_DONE = "worker_done"


TERMINAL_STATUSES = frozenset({Status.SUCCESS, Status.TIMEOUT, Status.FAILED})


@dataclass(frozen=True)
class StatusEvent:
    status: Status
    worker_id: int


class WorkerConfig(BaseModel):
    """
    Immutable inputs handed to a single worker when it is spawned.
    """

    worker_id: int = Field(..., ge=0, description="Index of the worker within the run.")
    server: Tuple[str, int] = Field(..., description="Target resolver (host, port).")
    record: RecordType = Field(RecordType.A, description="Query record type.")
    number: int = Field(..., ge=0, description="Query iterations to perform.")
    timeout_seconds: float = Field(..., gt=0, description="Per-receive timeout.")
    mismatch_policy: MismatchPolicy = Field(MismatchPolicy.DEADLINE)
    recv_buffer_size: int = Field(4096, ge=512)

    model_config = {
        "frozen": True,
    }


@dataclass(frozen=True)
class DomainPool:
    """
    Read-only, ordered collection of candidate query names.

    Built once before workers start and shared by reference between them.
    """

    names: Tuple[str, ...]

    @classmethod
    def from_names(cls, names: Sequence[str]) -> "DomainPool":
        return cls(names=tuple(names))

    def __len__(self) -> int:
        return len(self.names)

    def choose(self, rng: random.Random) -> str:
        """Pick a name uniformly at random."""
        if not self.names:
            raise ValueError("cannot select a domain from an empty pool")
        return rng.choice(self.names)


class RunSummary(TypedDict, total=False):
    """
    Final aggregate counters for a run.

    Profiling fields are optional; they are only filled in when the
    orchestrator measured the run.
    """

    sent: int
    success: int
    timeout: int
    failed: int
    workers_done: int
    threads: int
    total_queries: int
    percent: float
    elapsed_seconds: float
    queries_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


__all__ = [
    "DomainPool",
    "MismatchPolicy",
    "RecordType",
    "RunSummary",
    "Status",
    "StatusEvent",
    "TERMINAL_STATUSES",
    "WorkerConfig",
]
