"""
Orchestrator for a dnsblast load run.

Validates the startup inputs, loads the domain pool, binds one endpoint per
worker, fans the workers out on threads, and fans their status events back
in through a single Aggregator on the calling thread.

Usage (example from CLI):
    from dnsblast.orchestrator import RunConfig, run_load

    summary = run_load(RunConfig(server="127.0.0.1:53", threads=4, number=1000))
    print(summary)

Every startup-fatal condition raises StartupError before any worker starts.
"""

from __future__ import annotations

import queue
import threading
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from dnsblast.config import Settings, get_settings
from dnsblast.domain.errors import StartupError
from dnsblast.domain.models import (
    DomainPool,
    MismatchPolicy,
    RecordType,
    RunSummary,
    StatusEvent,
    WorkerConfig,
)
from dnsblast.engine.abstract import Codec, Endpoint
from dnsblast.engine.aggregator import Aggregator
from dnsblast.engine.allocator import TransactionIdAllocator
from dnsblast.engine.worker import QueryWorker
from dnsblast.infrastructure.codec import DnsCodec
from dnsblast.infrastructure.domain_file import read_domains
from dnsblast.infrastructure.endpoint import ServerAddress, open_endpoint, parse_server_address
from dnsblast.utils.logging import get_logger
from dnsblast.utils.profiler import profile_block

log = get_logger(__name__)

EndpointFactory = Callable[[ServerAddress], Endpoint]


@dataclass(frozen=True)
class RunConfig:
    """
    Inputs for one load run.

    Parameters
    ----------
    server : str
        Target resolver as ``ip:port`` (or ``[ipv6]:port``).
    threads : int
        Number of workers, each with its own endpoint.
    number : int
        Queries issued by each worker.
    domains_file : Path | str
        Newline-delimited domain list.
    record : RecordType | str
        ``A`` or ``AAAA``.
    timeout_ms : int
        Per-receive timeout in milliseconds.
    verbosity : int
        0 final line only, 1 adds a progress line per event, 2 adds per-query
        detail through DEBUG logging.
    mismatch_policy : MismatchPolicy | str
        How long to keep waiting after replies with a foreign transaction ID.
    recv_buffer_size : int
        Largest reply datagram read from the endpoint.
    """

    server: str
    threads: int = 10
    number: int = 100
    domains_file: Union[Path, str] = "domains.txt"
    record: Union[RecordType, str] = RecordType.A
    timeout_ms: int = 500
    verbosity: int = 0
    mismatch_policy: Union[MismatchPolicy, str] = MismatchPolicy.DEADLINE
    recv_buffer_size: int = 4096

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides) -> "RunConfig":
        """Build a config from settings, letting non-None overrides win."""
        settings = settings or get_settings()
        values = {
            "server": settings.server,
            "threads": settings.threads,
            "number": settings.number,
            "domains_file": settings.domains_file,
            "record": settings.record,
            "timeout_ms": settings.timeout_ms,
            "verbosity": settings.debug,
            "mismatch_policy": settings.mismatch_policy,
            "recv_buffer_size": settings.recv_buffer_size,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        if not values["server"]:
            raise StartupError("no target server given (use --server or DNSBLAST_SERVER)")
        return cls(**values)


def _resolve_record(value: Union[RecordType, str]) -> RecordType:
    try:
        return RecordType(getattr(value, "value", value))
    except ValueError:
        raise StartupError(f"invalid record type '{value}' (expected A or AAAA)") from None


def _resolve_policy(value: Union[MismatchPolicy, str]) -> MismatchPolicy:
    try:
        return MismatchPolicy(str(getattr(value, "value", value)).lower())
    except ValueError:
        choices = ", ".join(p.value for p in MismatchPolicy)
        raise StartupError(f"invalid mismatch policy '{value}' (expected one of: {choices})") from None


def _validate(config: RunConfig) -> None:
    if config.threads < 1:
        raise StartupError("threads must be at least 1")
    if config.number < 0:
        raise StartupError("number must not be negative")
    if config.timeout_ms <= 0:
        raise StartupError("timeout must be a positive number of milliseconds")


def run_load(
    config: RunConfig,
    pool: Optional[DomainPool] = None,
    endpoint_factory: EndpointFactory = open_endpoint,
    codec_factory: Callable[[], Codec] = DnsCodec,
    echo: Optional[Callable[[str], None]] = None,
) -> RunSummary:
    """
    Run the load profile described by ``config`` and return the final counters.

    Parameters
    ----------
    config : RunConfig
        Run inputs.
    pool : DomainPool | None
        Preloaded domain pool; read from ``config.domains_file`` when omitted.
    endpoint_factory : callable
        Creates one dedicated endpoint per worker for the parsed server address.
    codec_factory : callable
        Creates the wire codec handed to each worker.
    echo : callable | None
        Sink for progress and final lines (defaults to the console).

    Raises
    ------
    StartupError
        For invalid inputs, an unreadable or empty domain list, an unparsable
        server address, or an endpoint that cannot be bound.
    """
    _validate(config)
    record = _resolve_record(config.record)
    policy = _resolve_policy(config.mismatch_policy)
    server = parse_server_address(config.server)

    if pool is None:
        pool = read_domains(config.domains_file)
    if not len(pool):
        raise StartupError("domain pool is empty; no valid domains to query")

    log.info(
        "[RUN START]",
        extra={
            "server": f"{server[0]}:{server[1]}",
            "threads": config.threads,
            "number": config.number,
            "record": record.value,
            "timeout_ms": config.timeout_ms,
            "mismatch_policy": policy.value,
            "domains": len(pool),
        },
    )

    with ExitStack() as stack:
        endpoints: List[Endpoint] = []
        for _ in range(config.threads):
            endpoint = endpoint_factory(server)
            stack.callback(endpoint.close)
            endpoints.append(endpoint)

        events: "queue.SimpleQueue[StatusEvent]" = queue.SimpleQueue()
        allocator = TransactionIdAllocator()
        workers = [
            QueryWorker(
                config=WorkerConfig(
                    worker_id=index,
                    server=server,
                    record=record,
                    number=config.number,
                    timeout_seconds=config.timeout_ms / 1000.0,
                    mismatch_policy=policy,
                    recv_buffer_size=config.recv_buffer_size,
                ),
                pool=pool,
                allocator=allocator,
                endpoint=endpoint,
                events=events,
                codec=codec_factory(),
            )
            for index, endpoint in enumerate(endpoints)
        ]
        threads = [
            threading.Thread(target=worker.run, name=f"worker-{worker.worker_id}", daemon=True)
            for worker in workers
        ]

        with profile_block("load-run") as stats:
            aggregator = Aggregator(
                threads=config.threads,
                number=config.number,
                verbosity=config.verbosity,
                echo=echo,
            )
            for thread in threads:
                thread.start()
            summary = aggregator.run(events)
            for thread in threads:
                thread.join()

    summary["peak_rss_bytes"] = stats.peak_rss_bytes
    summary["cpu_percent"] = round(stats.cpu_percent, 1) if stats.cpu_percent is not None else None

    log.info(
        "[RUN COMPLETE]",
        extra={
            "sent": summary["sent"],
            "success": summary["success"],
            "timeout": summary["timeout"],
            "failed": summary["failed"],
            "elapsed_seconds": summary["elapsed_seconds"],
            "peak_threads": stats.peak_threads,
        },
    )
    return summary


__all__ = ["RunConfig", "run_load"]
