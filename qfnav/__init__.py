"""Public package surface for qfnav.

Exports ``setup`` and the engine types hosts need, plus ``main`` for
programmatic CLI invocation.
"""

from __future__ import annotations

from .config import EngineConfig, FollowStrategy, ListOptions
from .engine import QfEngine, setup
from .entries import Entry, EntryKind, ListKind


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "Entry",
    "EntryKind",
    "EngineConfig",
    "FollowStrategy",
    "ListKind",
    "ListOptions",
    "QfEngine",
    "main",
    "setup",
]
