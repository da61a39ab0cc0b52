"""Named list snapshots, filtering, tallies, and sorting.

Snapshots are frozen copies: later edits to the live list never leak into a
saved one.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from .config import EngineConfig
from .entries import Entry, EntryKind, ListKind, entry_file_name, is_valid, list_items
from .host import Host

logger = logging.getLogger(__name__)

INVALID_TEXT = "invalid"
TALLY_SEPARATOR = "-"

_TALLY_ORDER = (
    (EntryKind.ERROR, "E"),
    (EntryKind.WARNING, "W"),
    (EntryKind.INFO, "I"),
    (EntryKind.NOTE, "N"),
    (EntryKind.UNCLASSIFIED, "?"),
)


@dataclass
class Archive:
    """Process-lifetime mapping of names to frozen entry snapshots."""

    snapshots: dict[str, tuple[Entry, ...]] = field(default_factory=dict)

    def save(self, name: str, items: Iterable[Entry]) -> None:
        self.snapshots[name] = tuple(items)

    def get(self, name: str) -> tuple[Entry, ...] | None:
        return self.snapshots.get(name)

    def names(self) -> list[str]:
        return list(self.snapshots)

    def __len__(self) -> int:
        return len(self.snapshots)


@dataclass(frozen=True)
class EntryFilter:
    """Keep predicate; unset fields match everything."""

    kind: EntryKind | None = None
    text: str | None = None

    def matches(self, entry: Entry) -> bool:
        if self.kind is not None and entry.kind is not self.kind:
            return False
        if self.text is not None and self.text not in entry.text:
            return False
        return True


def tally_summary(items: Sequence[Entry]) -> str:
    """Summarize entry kinds, e.g. ``"E:2 W:1"``; zero counts are omitted."""
    counts = Counter(item.kind for item in items)
    parts = [f"{label}:{counts[kind]}" for kind, label in _TALLY_ORDER if counts[kind]]
    return " ".join(parts) if parts else "no items"


def tallied_title(title: str, summary: str) -> str:
    """Replace everything after the first ``-`` in ``title`` with ``summary``."""
    prefix = title.split(TALLY_SEPARATOR, 1)[0].rstrip()
    if prefix:
        return f"{prefix} {TALLY_SEPARATOR} {summary}"
    return f"{TALLY_SEPARATOR} {summary}"


def sort_entries(host: Host, items: Sequence[Entry]) -> list[Entry]:
    """Stable sort by ``(file name, line, column)``.

    Invalid entries keep their real sort keys but display ``"invalid"``.
    """
    keyed: list[tuple[tuple[str, int, int], Entry]] = []
    for item in items:
        name = entry_file_name(host, item)
        shown = item if is_valid(host, item) else item.with_text(INVALID_TEXT)
        keyed.append(((name, item.line, item.column), shown))
    keyed.sort(key=lambda pair: pair[0])
    return [entry for _key, entry in keyed]


class ListEditOps:
    """Commands that replace list contents: set, keep, sort, tally, save, load."""

    def __init__(
        self,
        host: Host,
        config: EngineConfig,
        archive: Archive,
        *,
        open_list: Callable[..., bool],
        close_list: Callable[[ListKind], None],
        reset_follow: Callable[[ListKind], None],
    ) -> None:
        self.host = host
        self.config = config
        self.archive = archive
        self._open_list = open_list
        self._close_list = close_list
        self._reset_follow = reset_follow

    def set(
        self,
        kind: ListKind,
        *,
        items: Sequence[Entry] | None = None,
        lines: Sequence[str] | None = None,
        title: str | None = None,
        tally: bool = False,
        open: bool = True,
    ) -> bool:
        """Replace list items from ``items`` or host-parsed ``lines``.

        Resets the follow memo, then opens the list quietly (or closes it when
        ``open`` is false). Returns ``False`` when no content was given.
        """
        host = self.host
        if items is None and lines is None:
            host.report_error("Missing either items or lines")
            return False

        new_items = list(items) if items is not None else []
        if lines is not None:
            new_items.extend(host.entries_from_lines(kind, lines))
        host.replace_list_items(kind, new_items, title)

        if tally:
            self.tally(kind, title or "")
        self._reset_follow(kind)

        if open:
            self._open_list(kind, stay=True, silent=True)
        else:
            self._close_list(kind)
        return True

    def tally(self, kind: ListKind, title: str | None = None) -> str:
        """Append a per-kind count summary to the list title and return it."""
        if title is None:
            title = self.host.list_title(kind)
        new_title = tallied_title(title, tally_summary(list_items(self.host, kind)))
        self.host.set_list_title(kind, new_title)
        return new_title

    def keep(self, kind: ListKind, entry_filter: EntryFilter) -> int:
        """Keep only entries matching ``entry_filter``; returns how many remain."""
        kept = [item for item in list_items(self.host, kind) if entry_filter.matches(item)]
        self.set(kind, items=kept, open=True)
        return len(kept)

    def sort(self, kind: ListKind) -> None:
        items = sort_entries(self.host, list_items(self.host, kind, include_invalid=True))
        self.set(kind, items=items)

    def save(self, kind: ListKind, name: str) -> None:
        self.archive.save(name, list_items(self.host, kind))
        logger.debug("saved %s as %r", kind.name, name)

    def _prompt_name(self) -> str | None:
        names = self.archive.names()
        if not names:
            self.host.report_error("No saved lists")
            return None
        choice = self.host.confirm_choice("Choose saved list", names)
        if choice is None or not (0 <= choice < len(names)):
            return None
        return names[choice]

    def load(self, kind: ListKind, name: str | None = None) -> bool:
        """Replace list items with a saved snapshot, prompting when ``name`` is omitted."""
        if name is None:
            name = self._prompt_name()
            if name is None:
                return False

        snapshot = self.archive.get(name)
        if snapshot is None:
            self.host.report_error(f"No list saved with name: {name}")
            return False

        self.host.replace_list_items(kind, list(snapshot))
        self._reset_follow(kind)
        if self.config.for_kind(kind).auto_open:
            self._open_list(kind, stay=True)
        return True


__all__ = [
    "Archive",
    "EntryFilter",
    "INVALID_TEXT",
    "ListEditOps",
    "sort_entries",
    "tallied_title",
    "tally_summary",
]
