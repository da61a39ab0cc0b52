"""Cursor-follow strategies: map a cursor position onto a list entry.

All strategies scan the unfiltered item sequence so returned indices match
the host's numbering, and skip invalid entries themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from .config import EngineConfig, FollowStrategy
from .entries import Entry, ListKind, is_valid, list_items
from .host import Host

logger = logging.getLogger(__name__)

ValidFn = Callable[[Entry], bool]


@dataclass
class FollowState:
    """Per-list memo of the cursor line seen by the last follow call."""

    last_line: int | None = None

    def reset(self) -> None:
        self.last_line = None


def follow_prev(items: Sequence[Entry], buffer: object, line: int, valid: ValidFn) -> int | None:
    """Return the last same-buffer entry at or above ``line``.

    Falls back to the first same-buffer entry when every one is below.
    """
    fallback: int | None = None
    for idx in range(len(items) - 1, -1, -1):
        item = items[idx]
        if item.owner_ref != buffer or not valid(item):
            continue
        fallback = idx
        if item.line <= line:
            return idx
    return fallback


def follow_next(items: Sequence[Entry], buffer: object, line: int, valid: ValidFn) -> int | None:
    """Return the first same-buffer entry at or below ``line``.

    Falls back to the last same-buffer entry when every one is above.
    """
    fallback: int | None = None
    for idx, item in enumerate(items):
        if item.owner_ref != buffer or not valid(item):
            continue
        fallback = idx
        if item.line >= line:
            return idx
    return fallback


def follow_nearest(items: Sequence[Entry], buffer: object, line: int, valid: ValidFn) -> int | None:
    """Return the same-buffer entry closest to ``line``; ties keep the earliest."""
    best_idx: int | None = None
    best_distance = 0
    for idx, item in enumerate(items):
        if item.owner_ref != buffer or not valid(item):
            continue
        distance = abs(item.line - line)
        if best_idx is None or distance < best_distance:
            best_idx = idx
            best_distance = distance
    return best_idx


STRATEGIES: dict[FollowStrategy, Callable[[Sequence[Entry], object, int, ValidFn], int | None]] = {
    FollowStrategy.PREV: follow_prev,
    FollowStrategy.NEXT: follow_next,
    FollowStrategy.NEAREST: follow_nearest,
}


@dataclass(frozen=True)
class FollowOps:
    """Select the list entry under the cursor for one engine context."""

    host: Host
    config: EngineConfig
    states: Mapping[ListKind, FollowState]

    def follow(
        self,
        kind: ListKind,
        strategy: FollowStrategy | str | None = None,
        limit: int | bool | None = None,
    ) -> bool:
        """Select the entry matching the cursor using ``strategy``.

        No-op unless the host is in normal mode and the cursor changed line
        since the previous call for this list. ``limit=True`` uses the list's
        ``auto_follow_limit``. Returns whether an entry was selected.
        """
        host = self.host
        if not host.in_normal_mode():
            return False

        buffer, line = host.cursor_position()
        state = self.states[kind]
        if state.last_line is not None and state.last_line == line:
            return False
        state.last_line = line

        resolved = FollowStrategy.PREV if strategy is None else FollowStrategy.parse(strategy)
        if resolved is None:
            host.report_error(f"Invalid follow strategy {strategy}")
            return False

        items = list_items(host, kind, include_invalid=True)
        if not items:
            return False

        idx = STRATEGIES[resolved](items, buffer, line, lambda item: is_valid(host, item))
        if idx is None or items[idx].owner_ref != buffer:
            return False

        if limit is True:
            limit = self.config.for_kind(kind).auto_follow_limit
        if limit is not None and limit is not False and abs(items[idx].line - line) > limit:
            return False

        host.clear_message()
        host.select_entry(kind, idx)
        logger.debug("follow %s selected entry %d for line %d", kind.name, idx, line)
        return True


__all__ = [
    "FollowOps",
    "FollowState",
    "STRATEGIES",
    "follow_nearest",
    "follow_next",
    "follow_prev",
]
