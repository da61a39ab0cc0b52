"""Valid-entry stepping with optional wrap-around.

Boundary conditions are returned as ``NavResult`` values rather than raised;
commands decide whether to wrap or report.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from .entries import Entry, ListKind, is_valid, list_items
from .follow import follow_next, follow_prev
from .host import Host

logger = logging.getLogger(__name__)

NO_MORE_ITEMS_MESSAGE = "No more items"

ValidFn = Callable[[Entry], bool]


class NavError(Enum):
    EMPTY = "empty"
    NO_MORE_ITEMS = "no-more-items"


@dataclass(frozen=True)
class NavResult:
    """Outcome of one navigation step: a target index or an error tag."""

    index: int | None = None
    error: NavError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.index is not None

    @classmethod
    def to(cls, index: int) -> NavResult:
        return cls(index=index)

    @classmethod
    def no_more_items(cls) -> NavResult:
        return cls(error=NavError.NO_MORE_ITEMS)

    @classmethod
    def empty(cls) -> NavResult:
        return cls(error=NavError.EMPTY)


def prev_valid(items: Sequence[Entry], idx: int, valid: ValidFn) -> NavResult:
    """Step backwards from ``idx`` to the nearest valid entry, without wrapping."""
    while idx > 0:
        idx -= 1
        if valid(items[idx]):
            return NavResult.to(idx)
    return NavResult.no_more_items()


def next_valid(items: Sequence[Entry], idx: int, valid: ValidFn) -> NavResult:
    """Step forwards from ``idx`` to the nearest valid entry, without wrapping."""
    while idx < len(items) - 1:
        idx += 1
        if valid(items[idx]):
            return NavResult.to(idx)
    return NavResult.no_more_items()


def prev_valid_wrap(items: Sequence[Entry], start: int, valid: ValidFn) -> int:
    """Circular backwards scan starting just before ``start``.

    Visits every index once (``start`` itself last). Returns ``0`` when no
    entry is valid.
    """
    count = len(items)
    for step in range(1, count + 1):
        idx = (start - step) % count
        if valid(items[idx]):
            return idx
    return 0


def next_valid_wrap(items: Sequence[Entry], start: int, valid: ValidFn) -> int:
    """Circular forwards scan starting just after ``start``; ``0`` if none valid."""
    count = len(items)
    for step in range(1, count + 1):
        idx = (start + step) % count
        if valid(items[idx]):
            return idx
    return 0


@dataclass(frozen=True)
class NavigationOps:
    """Directional jump commands over one host."""

    host: Host

    def _valid(self, item: Entry) -> bool:
        return is_valid(self.host, item)

    def _items_or_report(self, kind: ListKind, verbose: bool) -> list[Entry] | None:
        """Return all items, or ``None`` after reporting an empty list.

        A list with no valid entries counts as empty.
        """
        items = list_items(self.host, kind, include_invalid=True)
        if not any(self._valid(item) for item in items):
            if verbose:
                self.host.report_error(f"{kind.label} empty")
            return None
        return items

    def _finish(self, kind: ListKind, result: NavResult) -> NavResult:
        if result.index is not None:
            self.host.jump_to_entry(kind, result.index)
            logger.debug("jumped %s to entry %d", kind.name, result.index)
        elif result.error is NavError.NO_MORE_ITEMS:
            self.host.report_error(NO_MORE_ITEMS_MESSAGE)
        return result

    def above(self, kind: ListKind, wrap: bool = True, verbose: bool = True) -> NavResult:
        """Jump to the closest valid entry above the cursor, switching buffers.

        The anchor is the ``next`` follow match so the entry at the cursor line
        itself is skipped.
        """
        items = self._items_or_report(kind, verbose)
        if items is None:
            return NavResult.empty()
        buffer, line = self.host.cursor_position()
        anchor = follow_next(items, buffer, line, self._valid)
        if anchor is None:
            anchor = len(items)
        if wrap:
            result = NavResult.to(prev_valid_wrap(items, anchor, self._valid))
        else:
            result = prev_valid(items, anchor, self._valid)
        return self._finish(kind, result)

    def below(self, kind: ListKind, wrap: bool = True, verbose: bool = True) -> NavResult:
        """Jump to the closest valid entry below the cursor, switching buffers."""
        items = self._items_or_report(kind, verbose)
        if items is None:
            return NavResult.empty()
        buffer, line = self.host.cursor_position()
        anchor = follow_prev(items, buffer, line, self._valid)
        if anchor is None:
            anchor = -1
        if wrap:
            result = NavResult.to(next_valid_wrap(items, anchor, self._valid))
        else:
            result = next_valid(items, anchor, self._valid)
        return self._finish(kind, result)

    def step(self, kind: ListKind, direction: int, wrap: bool = True, verbose: bool = True) -> NavResult:
        """Move to the next (``direction > 0``) or previous entry via the host.

        At a boundary this wraps to the opposite end when ``wrap`` is set and
        reports "No more items" otherwise.
        """
        items = self._items_or_report(kind, verbose)
        if items is None:
            return NavResult.empty()
        stepped = self.host.step_entry(kind, 1 if direction > 0 else -1)
        if stepped is not None:
            return NavResult.to(stepped)
        if not wrap:
            return self._finish(kind, NavResult.no_more_items())
        if direction > 0:
            target = next_valid_wrap(items, -1, self._valid)
        else:
            target = prev_valid_wrap(items, len(items), self._valid)
        return self._finish(kind, NavResult.to(target))

    def next(self, kind: ListKind, wrap: bool = True, verbose: bool = True) -> NavResult:
        return self.step(kind, 1, wrap=wrap, verbose=verbose)

    def prev(self, kind: ListKind, wrap: bool = True, verbose: bool = True) -> NavResult:
        return self.step(kind, -1, wrap=wrap, verbose=verbose)


__all__ = [
    "NO_MORE_ITEMS_MESSAGE",
    "NavError",
    "NavResult",
    "NavigationOps",
    "next_valid",
    "next_valid_wrap",
    "prev_valid",
    "prev_valid_wrap",
]
