from __future__ import annotations

import queue
from typing import List

from dnsblast.domain.models import Status, StatusEvent
from dnsblast.engine.aggregator import Aggregator

THREADS = 2
NUMBER = 2


class _FakeClock:
    def __init__(self) -> None:
        self.now = 50.0

    def __call__(self) -> float:
        return self.now


def _queue_of(events: List[StatusEvent]) -> "queue.SimpleQueue[StatusEvent]":
    channel: "queue.SimpleQueue[StatusEvent]" = queue.SimpleQueue()
    for event in events:
        channel.put(event)
    return channel


def _run_events() -> List[StatusEvent]:
    return [
        StatusEvent(Status.SENT, 0),
        StatusEvent(Status.SENT, 1),
        StatusEvent(Status.SUCCESS, 0),
        StatusEvent(Status.TIMEOUT, 1),
        StatusEvent(Status.FAILED, 1),
        StatusEvent(Status.SENT, 0),
        StatusEvent(Status.SUCCESS, 0),
        StatusEvent(Status.WORKER_DONE, 0),
        StatusEvent(Status.WORKER_DONE, 1),
    ]


def test_run_folds_events_into_counters_and_summary():
    clock = _FakeClock()
    lines: List[str] = []
    aggregator = Aggregator(THREADS, NUMBER, verbosity=0, echo=lines.append, clock=clock)
    clock.now += 2.0

    summary = aggregator.run(_queue_of(_run_events()))

    assert summary["sent"] == 3
    assert summary["success"] == 2
    assert summary["timeout"] == 1
    assert summary["failed"] == 1
    assert summary["workers_done"] == THREADS
    assert summary["total_queries"] == THREADS * NUMBER
    assert summary["percent"] == 75.0
    assert summary["elapsed_seconds"] == 2.0
    assert summary["queries_per_sec"] == 1.5


def test_quiet_run_prints_only_the_final_line():
    clock = _FakeClock()
    lines: List[str] = []
    aggregator = Aggregator(THREADS, NUMBER, verbosity=0, echo=lines.append, clock=clock)
    clock.now += 1.25

    aggregator.run(_queue_of(_run_events()))

    assert lines == [
        "ALLDONE sent: 3, success: 2, timeout: 1, failed: 1, thread finished: 2, "
        "percent: 100%, time: 1.250s"
    ]


def test_verbose_run_prints_a_progress_line_per_event():
    lines: List[str] = []
    aggregator = Aggregator(THREADS, NUMBER, verbosity=1, echo=lines.append, clock=_FakeClock())

    aggregator.run(_queue_of(_run_events()))

    assert len(lines) == len(_run_events()) + 1
    assert lines[0] == (
        "worker-0 sent: 1, success: 0, timeout: 0, failed: 0, thread finished: 0, "
        "percent: 25%, time: 0.000s"
    )
    assert lines[-2].startswith("worker-1 sent: 3,")
    assert lines[-1].startswith("ALLDONE ")


def test_run_stops_exactly_when_every_worker_is_done():
    events = [
        StatusEvent(Status.WORKER_DONE, 0),
        StatusEvent(Status.WORKER_DONE, 1),
        StatusEvent(Status.SENT, 2),
    ]
    channel = _queue_of(events)
    aggregator = Aggregator(THREADS, NUMBER, echo=lambda line: None, clock=_FakeClock())

    summary = aggregator.run(channel)

    assert summary["workers_done"] == THREADS
    assert summary["sent"] == 0
    assert channel.qsize() == 1


def test_apply_reports_done_only_on_last_worker():
    aggregator = Aggregator(THREADS, NUMBER, echo=lambda line: None, clock=_FakeClock())

    assert aggregator.apply(StatusEvent(Status.SENT, 0)) is False
    assert aggregator.apply(StatusEvent(Status.WORKER_DONE, 0)) is False
    assert aggregator.apply(StatusEvent(Status.WORKER_DONE, 1)) is True
    assert aggregator.done


def test_percent_with_no_configured_queries_is_complete():
    aggregator = Aggregator(threads=1, number=0, echo=lambda line: None, clock=_FakeClock())
    assert aggregator.percent() == 100.0
