"""Errors raised while preparing a run."""

from __future__ import annotations


class StartupError(RuntimeError):
    """A condition that prevents the run from starting; no workers are spawned."""


__all__ = ["StartupError"]
