"""
Logging setup for dnsblast.

Log output goes to stderr so it never mixes with the progress and summary
lines the aggregator prints on stdout. Two renderings are available:

- console: one line per record, with ``extra`` fields appended as key=value
- json: one object per record, with ``extra`` fields promoted to top-level keys

Worker threads log per-query detail at DEBUG; ``-v 2`` on the CLI lowers the
root level so that detail shows up.

Usage:
    from dnsblast.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_logs=False)
    log = get_logger(__name__)
    log.info("Endpoint bound", extra={"worker": 3, "txid": 1024})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

DETAIL_VERBOSITY = 2

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "extra"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    fields = {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }
    # ``extra={"extra": {...}}`` nests the fields one level down
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        fields.update(nested)
    return fields


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as a single JSON object."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "thread": record.threadName,
        "message": record.getMessage(),
    }
    payload.update(_extra_fields(record))
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Structured formatter for log collectors."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines that keep worker/txid context visible."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        line = super().format(record)
        fields = _extra_fields(record)
        if not fields:
            return line
        context = " ".join(f"{key}={value}" for key, value in fields.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{context}]{sep}{tail}"


def level_for_verbosity(verbosity: int, configured: str) -> str:
    """Return DEBUG at per-query detail verbosity, else the configured level."""
    if verbosity >= DETAIL_VERBOSITY:
        return "DEBUG"
    return configured.upper()


def configure_logging(
    level: str = "WARNING",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Configure root logging on stderr.

    Parameters
    ----------
    level : str
        Level name, case-insensitive (e.g. "debug", "WARNING").
    json_logs : bool
        Emit JSON objects instead of console lines.
    force : bool
        When False and the root logger already has handlers, only the level
        is adjusted.
    """
    level = level.upper()
    root = logging.getLogger()
    if not force and root.handlers:
        root.setLevel(level)
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "()": ConsoleFormatter,
                    "fmt": "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s",
                    "datefmt": "%H:%M:%S",
                },
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "json" if json_logs else "console",
                    "level": level,
                }
            },
            "root": {"handlers": ["stderr"], "level": level},
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the named logger (the root logger when ``name`` is None)."""
    return logging.getLogger(name)


__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
    "level_for_verbosity",
]
