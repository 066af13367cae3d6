from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from dnsblast.config import get_settings
from dnsblast.domain.errors import StartupError
from dnsblast.domain.models import MismatchPolicy, RecordType
from dnsblast.orchestrator import RunConfig, run_load
from dnsblast.reporter import print_summary
from dnsblast.utils.logging import configure_logging, get_logger, level_for_verbosity

app = typer.Typer(help="Concurrent DNS query load generator.")
log = get_logger(__name__)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"server={settings.server or '-'} | threads={settings.threads} number={settings.number} "
        f"record={settings.record} timeout={settings.timeout_ms}ms domains={settings.domains_file} "
        f"mismatch_policy={settings.mismatch_policy} debug={settings.debug}"
    )


@app.command()
def run(
    threads: Optional[int] = typer.Option(
        None, "--threads", "-p", min=1, help="Number of worker threads [default: 10]."
    ),
    number: Optional[int] = typer.Option(
        None, "--number", "-n", min=0, help="Queries issued by each worker [default: 100]."
    ),
    domains: Optional[Path] = typer.Option(
        None,
        "--domains",
        "-d",
        help="Domains file; queries pick names from it at random [default: domains.txt].",
    ),
    record: Optional[RecordType] = typer.Option(
        None, "--record", "-r", help="Query A or AAAA records [default: A]."
    ),
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="DNS server address, e.g. 127.0.0.1:53 (required)."
    ),
    timeout: Optional[int] = typer.Option(
        None, "--timeout", "-t", min=1, help="Timeout for each request in ms [default: 500]."
    ),
    debug: Optional[int] = typer.Option(
        None,
        "--debug",
        "-v",
        min=0,
        max=2,
        help="0: final line only, 1: progress per event, 2: per-query detail.",
    ),
    mismatch_policy: Optional[MismatchPolicy] = typer.Option(
        None,
        "--mismatch-policy",
        case_sensitive=False,
        help="Wait budget after replies with a foreign ID [default: deadline].",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the final summary as JSON."),
    table: bool = typer.Option(False, "--table", help="Render the final summary as a table."),
    json_logs: Optional[bool] = typer.Option(
        None, "--json-logs/--text-logs", help="Emit logs as JSON."
    ),
) -> None:
    """
    Fire queries at a resolver from parallel workers and report the counts.
    """
    settings = get_settings()
    verbosity = settings.debug if debug is None else debug
    level = level_for_verbosity(verbosity, settings.log_level)
    configure_logging(level=level, json_logs=settings.json_logs if json_logs is None else json_logs)

    try:
        config = RunConfig.from_settings(
            settings,
            server=server,
            threads=threads,
            number=number,
            domains_file=domains,
            record=record,
            timeout_ms=timeout,
            verbosity=debug,
            mismatch_policy=mismatch_policy,
        )
        summary = run_load(config)
    except StartupError as exc:
        log.error("[STARTUP FAILED] %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(summary, indent=2))
    if table:
        print_summary(summary)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
