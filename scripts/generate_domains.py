"""
Domain list generator for dnsblast.

Writes a deterministic, newline-delimited list of pseudo-random hostnames
under one or more zones, suitable for the ``--domains`` option.
"""

from __future__ import annotations

import random
import string
import sys
import time
from pathlib import Path
from typing import List

import typer

app = typer.Typer(help="Generate a newline-delimited domain list for dnsblast.")

_ALPHABET = string.ascii_lowercase + string.digits


def _random_label(rng: random.Random, min_len: int = 6, max_len: int = 14) -> str:
    return "".join(rng.choice(_ALPHABET) for _ in range(rng.randint(min_len, max_len)))


def _generate_domains(count: int, zones: List[str], seed: int) -> List[str]:
    rng = random.Random(seed)
    return [f"{_random_label(rng)}.{rng.choice(zones)}" for _ in range(count)]


def _write_domains(path: Path, domains: List[str], batch_size: int = 10_000) -> None:
    with path.open("w", encoding="utf-8") as f:
        buffer: list[str] = []
        for name in domains:
            buffer.append(name)
            if len(buffer) >= batch_size:
                f.write("\n".join(buffer) + "\n")
                buffer.clear()
        if buffer:
            f.write("\n".join(buffer) + "\n")


@app.command()
def main(
    count: int = typer.Option(1_000, "--count", "-c", min=1, help="Number of names to generate."),
    zone: List[str] = typer.Option(
        ["example.com"],
        "--zone",
        "-z",
        help="Parent zone(s) for the generated names; repeat to mix zones.",
    ),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    output: Path = typer.Option(Path("domains.txt"), "--output", "-o", help="Output file path."),
) -> None:
    """
    Generate pseudo-random names under the given zones and write them to a file.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)
    domains = _generate_domains(count, zone, seed)
    _write_domains(output, domains)
    duration = time.perf_counter() - start
    typer.echo(f"Wrote {count:,} domains -> {output} (zones={', '.join(zone)}, seed={seed}) in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
