"""
Utilities package for dnsblast.

Exports shared helpers for logging and profiling. Keep this package
lightweight and free of DNS-specific logic.
"""

from dnsblast.utils.logging import configure_logging, get_logger, level_for_verbosity
from dnsblast.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "level_for_verbosity",
    "ProfileStats",
    "profile_block",
]
