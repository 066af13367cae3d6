from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from rich import box
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from dnsblast.engine.aggregator import Counters

_console = Console(highlight=False, markup=False, soft_wrap=True)


def echo(line: str) -> None:
    """Write one plain progress/summary line to stdout."""
    _console.print(line)


def _counter_fields(counters: "Counters") -> str:
    return (
        f"sent: {counters.sent}, success: {counters.success}, "
        f"timeout: {counters.timeout}, failed: {counters.failed}, "
        f"thread finished: {counters.workers_done}"
    )


def format_progress_line(
    worker_id: int, counters: "Counters", percent: float, elapsed: float
) -> str:
    return (
        f"worker-{worker_id} {_counter_fields(counters)}, "
        f"percent: {int(percent)}%, time: {elapsed:.3f}s"
    )


def format_final_line(counters: "Counters", elapsed: float) -> str:
    return f"ALLDONE {_counter_fields(counters)}, percent: 100%, time: {elapsed:.3f}s"


def print_summary(summary: Mapping[str, Any], console: Console | None = None) -> None:
    """
    Render a run summary as a rich table.

    Profiling columns show N/A when the run was not measured.
    """
    console = console or Console()

    table = Table(
        title="dnsblast run summary",
        box=box.ROUNDED,
        caption=f"{summary.get('threads', 0)} workers, {summary.get('total_queries', 0):,} queries",
    )
    table.add_column("Sent", justify="right", style="cyan")
    table.add_column("Success", justify="right", style="bold green")
    table.add_column("Timeout", justify="right", style="yellow")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Done %", justify="right", style="magenta")
    table.add_column("Elapsed (s)", justify="right", style="green")
    table.add_column("Queries/s", justify="right", style="bold green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")

    mem_bytes = summary.get("peak_rss_bytes")
    mem_str = f"{mem_bytes / (1024 * 1024):.2f}" if mem_bytes else "N/A"
    cpu = summary.get("cpu_percent")
    cpu_str = f"{cpu:.1f}" if cpu is not None else "N/A"

    table.add_row(
        f"{summary.get('sent', 0):,}",
        f"{summary.get('success', 0):,}",
        f"{summary.get('timeout', 0):,}",
        f"{summary.get('failed', 0):,}",
        f"{summary.get('percent', 0.0):.1f}",
        f"{summary.get('elapsed_seconds', 0.0):.2f}",
        f"{summary.get('queries_per_sec', 0.0):,.2f}",
        mem_str,
        cpu_str,
    )

    console.print(table)


__all__ = ["echo", "format_final_line", "format_progress_line", "print_summary"]
