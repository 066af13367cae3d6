"""
Pytest configuration for dnsblast.

Provides fixtures for:
- Settings isolation (env vars and the cached settings instance)
- Domain list files
- A loopback stub resolver for integration tests
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator, List

import pytest

from dnsblast.config import get_settings
from scripts.stub_resolver import StubResolver

VALID_DOMAINS = ["example.com", "www.example.org", "mail.test-zone.net"]
MALFORMED_DOMAIN = "bad..domain"

_SETTINGS_ENV_VARS = [
    "DNSBLAST_THREADS",
    "DNSBLAST_NUMBER",
    "DNSBLAST_DOMAINS",
    "DNSBLAST_RECORD",
    "DNSBLAST_SERVER",
    "DNSBLAST_TIMEOUT_MS",
    "DNSBLAST_DEBUG",
    "DNSBLAST_MISMATCH_POLICY",
    "DNSBLAST_RECV_BUFFER",
    "LOG_LEVEL",
    "LOG_JSON",
]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path: Path) -> Generator[None, None, None]:
    """
    Clear dnsblast env vars and the settings cache around every test.

    Runs from a temp directory so a developer's `.env` is never picked up.
    """
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def domains_file(tmp_path: Path) -> Path:
    """
    Domain list with 3 valid names, 1 malformed name and a blank line.
    """
    path = tmp_path / "domains.txt"
    lines = [VALID_DOMAINS[0], "", VALID_DOMAINS[1], MALFORMED_DOMAIN, VALID_DOMAINS[2]]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def stub_resolver() -> Generator[Callable[[str], StubResolver], None, None]:
    """
    Factory for started loopback resolvers; all are stopped on teardown.
    """
    started: List[StubResolver] = []

    def _start(mode: str = "answer") -> StubResolver:
        resolver = StubResolver(mode=mode).start()
        started.append(resolver)
        return resolver

    yield _start

    for resolver in started:
        resolver.stop()
