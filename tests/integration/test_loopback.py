"""
Integration tests for dnsblast against a loopback stub resolver.

These tests use real UDP sockets and the dnspython codec and verify that:
1. Well-formed replies are counted as successes
2. Silent servers produce timeouts
3. Replies with a foreign transaction ID are skipped, not counted
4. Undecodable replies are counted as failures
5. The CLI prints the final line and the JSON summary

The stub resolver binds 127.0.0.1 on an ephemeral port, so no external
DNS server is needed.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dnsblast.domain.models import MismatchPolicy, RecordType
from dnsblast.main import app
from dnsblast.orchestrator import RunConfig, run_load

# Test configuration constants
DEFAULT_THREADS = 3
DEFAULT_NUMBER = 4
DEFAULT_TIMEOUT_MS = 500
SILENT_TIMEOUT_MS = 30

TOTAL = DEFAULT_THREADS * DEFAULT_NUMBER

pytestmark = pytest.mark.slow


def _run(resolver, domains_file: Path, **overrides):
    values = {
        "server": resolver.server,
        "threads": DEFAULT_THREADS,
        "number": DEFAULT_NUMBER,
        "domains_file": domains_file,
        "timeout_ms": DEFAULT_TIMEOUT_MS,
    }
    values.update(overrides)
    lines: list = []
    summary = run_load(RunConfig(**values), echo=lines.append)
    return summary, lines


class TestLoopbackOutcomes:
    """Each stub resolver mode maps to one outcome counter."""

    def test_answering_resolver_yields_only_successes(self, stub_resolver, domains_file):
        resolver = stub_resolver("answer")

        summary, lines = _run(resolver, domains_file)

        assert summary["sent"] == TOTAL
        assert summary["success"] == TOTAL
        assert summary["timeout"] == 0
        assert summary["failed"] == 0
        assert summary["workers_done"] == DEFAULT_THREADS
        assert resolver.queries_seen == TOTAL
        assert lines[-1].startswith(f"ALLDONE sent: {TOTAL}, success: {TOTAL},")

    def test_aaaa_queries_succeed(self, stub_resolver, domains_file):
        resolver = stub_resolver("answer")

        summary, _ = _run(resolver, domains_file, record=RecordType.AAAA)

        assert summary["success"] == TOTAL

    def test_silent_resolver_yields_only_timeouts(self, stub_resolver, domains_file):
        resolver = stub_resolver("silent")

        summary, _ = _run(resolver, domains_file, timeout_ms=SILENT_TIMEOUT_MS)

        assert summary["sent"] == TOTAL
        assert summary["timeout"] == TOTAL
        assert summary["success"] == 0
        assert summary["elapsed_seconds"] >= DEFAULT_NUMBER * SILENT_TIMEOUT_MS / 1000 * 0.9

    @pytest.mark.parametrize("policy", [MismatchPolicy.DEADLINE, MismatchPolicy.RESET])
    def test_foreign_ids_are_skipped_until_the_real_reply(self, stub_resolver, domains_file, policy):
        resolver = stub_resolver("mismatch")

        summary, _ = _run(resolver, domains_file, mismatch_policy=policy)

        assert summary["success"] == TOTAL
        assert summary["timeout"] == 0
        assert summary["failed"] == 0

    def test_garbage_replies_are_failures(self, stub_resolver, domains_file):
        resolver = stub_resolver("garbage")

        summary, _ = _run(resolver, domains_file)

        assert summary["sent"] == TOTAL
        assert summary["failed"] == TOTAL
        assert summary["success"] == 0

    def test_verbose_run_reports_progress_per_event(self, stub_resolver, domains_file):
        resolver = stub_resolver("answer")

        _, lines = _run(resolver, domains_file, verbosity=1)

        progress = lines[:-1]
        assert len(progress) == 2 * TOTAL + DEFAULT_THREADS
        assert all(line.startswith("worker-") for line in progress)
        assert sum("thread finished: " in line for line in progress) == len(progress)


class TestCliAgainstStub:
    """Run the typer CLI end to end."""

    def test_run_prints_final_line_and_json_summary(self, stub_resolver, domains_file):
        resolver = stub_resolver("answer")
        runner = CliRunner()

        result = runner.invoke(
            app,
            [
                "run",
                "-s",
                resolver.server,
                "-d",
                str(domains_file),
                "-p",
                "2",
                "-n",
                "3",
                "-r",
                "AAAA",
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "ALLDONE sent: 6, success: 6, timeout: 0, failed: 0" in result.output
        summary = json.loads(result.output[result.output.index("{") :])
        assert summary["success"] == 6
        assert summary["threads"] == 2
