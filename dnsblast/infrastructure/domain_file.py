"""
Domain list loading for dnsblast.

Reads a newline-delimited file of query names, keeps the lines that are
syntactically valid hostnames, and freezes them into a DomainPool. Invalid
lines are dropped (logged at DEBUG); an unreadable file is fatal.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List

import dns.exception
import dns.name

from dnsblast.domain.errors import StartupError
from dnsblast.domain.models import DomainPool
from dnsblast.utils.logging import get_logger

log = get_logger(__name__)

# LDH labels; "_" is allowed for service labels (_dmarc, _sip._udp)
_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")
_MAX_NAME_LENGTH = 253


def is_valid_domain(name: str) -> bool:
    """
    Return True if ``name`` is a syntactically well-formed domain name.

    Single-label names such as ``localhost`` are accepted. The last label
    must not be purely numeric, which rules out dotted IPv4 literals; a
    single trailing dot is accepted.
    """
    candidate = name[:-1] if name.endswith(".") else name
    if not candidate or len(candidate) > _MAX_NAME_LENGTH:
        return False

    labels = candidate.split(".")
    if not all(_LABEL_RE.match(label) for label in labels):
        return False
    if labels[-1].isdigit():
        return False

    try:
        dns.name.from_text(candidate)
    except dns.exception.DNSException:
        return False
    return True


def parse_domains(lines: Iterable[str]) -> List[str]:
    """Filter raw lines down to the valid, non-blank domain names, in order."""
    domains: List[str] = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        if is_valid_domain(line):
            domains.append(line)
        else:
            log.debug("Dropping invalid domain", extra={"line": lineno, "value": line})
    return domains


def read_domains(path: Path | str) -> DomainPool:
    """
    Load a DomainPool from ``path``.

    Raises
    ------
    StartupError
        If the file cannot be opened or decoded.
    """
    file_path = Path(path)
    try:
        with file_path.open("r", encoding="utf-8") as f:
            domains = parse_domains(f)
    except (OSError, UnicodeDecodeError) as exc:
        raise StartupError(f"cannot read domain file '{file_path}': {exc}") from exc

    log.info("Domain pool loaded", extra={"path": str(file_path), "domains": len(domains)})
    return DomainPool.from_names(domains)


__all__ = ["is_valid_domain", "parse_domains", "read_domains"]
