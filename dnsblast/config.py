"""
Configuration settings for dnsblast.

Uses Pydantic Settings to load environment variables for the load profile
(workers, queries per worker, timeouts), the target resolver, and logging.
CLI flags override these values; anything left unset on the command line
falls back to the settings below.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Load profile
    threads: int = Field(10, alias="DNSBLAST_THREADS", ge=1)
    number: int = Field(100, alias="DNSBLAST_NUMBER", ge=0)
    domains_file: str = Field("domains.txt", alias="DNSBLAST_DOMAINS")
    record: str = Field("A", alias="DNSBLAST_RECORD")
    timeout_ms: int = Field(500, alias="DNSBLAST_TIMEOUT_MS", gt=0)
    debug: int = Field(0, alias="DNSBLAST_DEBUG", ge=0, le=2)

    # Target resolver
    server: Optional[str] = Field(None, alias="DNSBLAST_SERVER")

    # Correlation
    mismatch_policy: str = Field("deadline", alias="DNSBLAST_MISMATCH_POLICY")
    recv_buffer_size: int = Field(4096, alias="DNSBLAST_RECV_BUFFER", ge=512)

    # Application
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
