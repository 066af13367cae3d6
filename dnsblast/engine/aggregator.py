"""
Aggregator: the single consumer of worker status events.

Folds every event into running counters, optionally echoes a progress line
per event, and stops once every spawned worker has reported completion.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from dnsblast.domain.models import RunSummary, Status, StatusEvent
from dnsblast.engine.abstract import EventSource
from dnsblast.reporter import echo as console_echo
from dnsblast.reporter import format_final_line, format_progress_line
from dnsblast.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class Counters:
    sent: int = 0
    success: int = 0
    timeout: int = 0
    failed: int = 0
    workers_done: int = 0

    def bump(self, status: Status) -> None:
        if status is Status.SENT:
            self.sent += 1
        elif status is Status.SUCCESS:
            self.success += 1
        elif status is Status.TIMEOUT:
            self.timeout += 1
        elif status is Status.FAILED:
            self.failed += 1
        elif status is Status.WORKER_DONE:
            self.workers_done += 1


class Aggregator:
    """
    Running/Done state machine over the event channel.

    Parameters
    ----------
    threads : int
        Number of spawned workers; the run is done when this many
        ``WORKER_DONE`` events have been seen.
    number : int
        Queries per worker, used to compute the completion percentage.
    verbosity : int
        0 prints only the final line, >= 1 also prints a line per event.
    echo : callable, optional
        Sink for rendered lines. Defaults to the reporter console.
    clock : callable
        Monotonic clock; the start timestamp is taken at construction.
    """

    def __init__(
        self,
        threads: int,
        number: int,
        verbosity: int = 0,
        echo: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.threads = threads
        self.number = number
        self.verbosity = verbosity
        self.counters = Counters()
        self._echo = echo or console_echo
        self._clock = clock
        self.start_ts = clock()

    @property
    def total_queries(self) -> int:
        return self.threads * self.number

    @property
    def done(self) -> bool:
        return self.counters.workers_done >= self.threads

    def percent(self) -> float:
        if self.total_queries == 0:
            return 100.0
        return 100.0 * self.counters.sent / self.total_queries

    def elapsed(self) -> float:
        return self._clock() - self.start_ts

    def apply(self, event: StatusEvent) -> bool:
        """Fold one event into the counters; return True once the run is done."""
        self.counters.bump(event.status)
        if self.verbosity >= 1:
            self._echo(
                format_progress_line(
                    event.worker_id, self.counters, self.percent(), self.elapsed()
                )
            )
        if event.status is Status.WORKER_DONE:
            log.debug(
                "Worker finished",
                extra={"worker": event.worker_id, "workers_done": self.counters.workers_done},
            )
        return self.done

    def run(self, events: EventSource) -> RunSummary:
        """Drain ``events`` until every worker is done, then print the final line."""
        while not self.done:
            self.apply(events.get())

        summary = self.summary()
        self._echo(format_final_line(self.counters, summary["elapsed_seconds"]))
        return summary

    def summary(self) -> RunSummary:
        elapsed = self.elapsed()
        counts = asdict(self.counters)
        return RunSummary(
            sent=counts["sent"],
            success=counts["success"],
            timeout=counts["timeout"],
            failed=counts["failed"],
            workers_done=counts["workers_done"],
            threads=self.threads,
            total_queries=self.total_queries,
            percent=round(self.percent(), 2),
            elapsed_seconds=round(elapsed, 3),
            queries_per_sec=round(self.counters.sent / elapsed, 2) if elapsed > 0 else 0.0,
        )


__all__ = ["Aggregator", "Counters"]
