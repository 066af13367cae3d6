"""
Resource profiling for a load run.

``profile_block`` wraps the whole fan-out/fan-in run and records how much
the generator itself costs while it is blasting queries:

- wall-clock duration (perf_counter)
- process CPU percent over the block (psutil)
- peak RSS and peak OS thread count, sampled on a background thread (psutil)

Usage:
    from dnsblast.utils.profiler import profile_block

    with profile_block("load-run") as stats:
        summary = aggregator.run(events)

    print(stats.duration_seconds, stats.peak_rss_bytes, stats.peak_threads)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass
from typing import Generator, Optional

import psutil


@dataclass
class ProfileStats:
    label: str
    start_ts: float = 0.0
    end_ts: float = 0.0
    duration_seconds: float = 0.0
    peak_rss_bytes: Optional[int] = None
    peak_threads: Optional[int] = None
    cpu_percent: Optional[float] = None


class _ResourceSampler(threading.Thread):
    """Polls RSS and thread count until stopped, keeping the maxima."""

    def __init__(self, process: psutil.Process, interval_seconds: float) -> None:
        super().__init__(name="rss-sampler", daemon=True)
        self._process = process
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self.peak_rss = 0
        self.peak_threads = 0
        self._sample()

    def _sample(self) -> bool:
        try:
            with self._process.oneshot():
                rss = self._process.memory_info().rss
                threads = self._process.num_threads()
        except psutil.Error:
            return False
        self.peak_rss = max(self.peak_rss, rss)
        self.peak_threads = max(self.peak_threads, threads)
        return True

    def run(self) -> None:
        while self._sample():
            if self._stop_event.wait(self._interval):
                return

    def stop(self) -> None:
        self._stop_event.set()
        self.join(timeout=1.0)
        self._sample()


@contextlib.contextmanager
def profile_block(label: str, sample_interval_ms: int = 50) -> Generator[ProfileStats, None, None]:
    """
    Profile the enclosed block.

    Parameters
    ----------
    label : str
        Name recorded on the returned stats.
    sample_interval_ms : int
        Polling interval for RSS and thread count.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    # first call only primes the counter
    process.cpu_percent(interval=None)

    sampler = _ResourceSampler(process, sample_interval_ms / 1000.0)
    sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        sampler.stop()

        stats.peak_rss_bytes = sampler.peak_rss or None
        stats.peak_threads = sampler.peak_threads or None
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
