"""Entry model for quickfix/location result lists.

Defines the entry record, its classification kinds, and the two list kinds.
Validity is always recomputed against the host; it is never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .host import Host


class ListKind(Enum):
    """The two parallel entry collections."""

    PRIMARY = "c"
    SECONDARY = "l"

    @property
    def label(self) -> str:
        return "Quickfix list" if self is ListKind.PRIMARY else "Location list"

    @property
    def other(self) -> ListKind:
        return ListKind.SECONDARY if self is ListKind.PRIMARY else ListKind.PRIMARY


class EntryKind(Enum):
    """Classification of one entry, keyed by the single-letter type code."""

    ERROR = "E"
    WARNING = "W"
    INFO = "I"
    NOTE = "N"
    UNCLASSIFIED = ""

    @classmethod
    def from_code(cls, code: object) -> EntryKind:
        """Map a type code (``"E"``, ``"w"``, ``"error"`` ...) onto a kind."""
        if isinstance(code, EntryKind):
            return code
        if not isinstance(code, str) or not code.strip():
            return cls.UNCLASSIFIED
        letter = code.strip()[0].upper()
        for kind in cls:
            if kind.value == letter:
                return kind
        return cls.UNCLASSIFIED


@dataclass(frozen=True)
class Entry:
    """One reported location.

    ``owner_ref`` is the host's opaque buffer identifier. ``file_name`` is an
    optional cached name; when empty the host resolves it from ``owner_ref``.
    """

    owner_ref: object
    line: int
    column: int = 0
    text: str = ""
    kind: EntryKind = EntryKind.UNCLASSIFIED
    file_name: str = ""

    def with_text(self, text: str) -> Entry:
        return replace(self, text=text)


_LIST_KIND_ALIASES = {
    "c": ListKind.PRIMARY,
    "quickfix": ListKind.PRIMARY,
    "qf": ListKind.PRIMARY,
    "primary": ListKind.PRIMARY,
    "l": ListKind.SECONDARY,
    "location": ListKind.SECONDARY,
    "loclist": ListKind.SECONDARY,
    "secondary": ListKind.SECONDARY,
}


def resolve_list_kind(value: ListKind | str, host: Host | None = None) -> ListKind:
    """Resolve a list discriminator to a ``ListKind``.

    ``"visible"`` picks the location list when its surface is open and falls
    back to the quickfix list otherwise; it needs ``host``.
    """
    if isinstance(value, ListKind):
        return value
    key = str(value).strip().lower()
    if key == "visible":
        if host is None:
            raise ValueError("'visible' list kind needs a host to resolve")
        if host.surface_state(ListKind.SECONDARY).is_open:
            return ListKind.SECONDARY
        return ListKind.PRIMARY
    try:
        return _LIST_KIND_ALIASES[key]
    except KeyError:
        raise ValueError(f"unknown list kind: {value!r}") from None


def is_valid(host: Host, entry: Entry) -> bool:
    """Return whether ``entry`` points at a loaded buffer and a real line."""
    if entry.line < 1:
        return False
    return bool(host.buffer_loaded(entry.owner_ref))


def list_items(host: Host, kind: ListKind, include_invalid: bool = False) -> list[Entry]:
    """Read the current items of ``kind`` from the host.

    Callers that do index arithmetic must pass ``include_invalid=True`` so
    indices line up with the host's own numbering.
    """
    items = list(host.list_items(kind))
    if include_invalid:
        return items
    return [item for item in items if is_valid(host, item)]


def entry_file_name(host: Host, entry: Entry) -> str:
    """Return the display/sort file name for ``entry``."""
    if entry.file_name:
        return entry.file_name
    return host.buffer_name(entry.owner_ref)


__all__ = [
    "Entry",
    "EntryKind",
    "ListKind",
    "entry_file_name",
    "is_valid",
    "list_items",
    "resolve_list_kind",
]
