"""In-process host implementation.

Models buffers, windows, one quickfix list and one location list per edit
window, plus event subscription and deferred callbacks. Used by the CLI and
as the fake editor in tests.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .entries import Entry, EntryKind, ListKind
from .host import CLOSED_SURFACE, EventHandler, EventName, SurfaceOptions, SurfaceState

_LINE_PATTERN = re.compile(
    r"^(?P<path>[^:]+):(?P<line>\d+):(?:(?P<column>\d+):)?\s*"
    r"(?:(?P<kind>error|warning|info|note):\s*)?(?P<text>.*)$",
    re.IGNORECASE,
)


@dataclass
class MemoryBuffer:
    name: str
    loaded: bool = True


@dataclass
class MemoryList:
    items: list[Entry] = field(default_factory=list)
    title: str = ""
    selected: int = 0


ListKey = tuple[ListKind, int | None]


class MemoryHost:
    def __init__(self) -> None:
        self.buffers: dict[int, MemoryBuffer] = {}
        self.windows: set[int] = set()
        self.window_buffers: dict[int, int | None] = {}
        self.surfaces: dict[ListKey, int] = {}
        self.surface_keys: dict[int, ListKey] = {}
        self.heights: dict[int, int] = {}
        self.surface_options: dict[int, SurfaceOptions] = {}
        self.primary = MemoryList()
        self.location_lists: dict[int, MemoryList] = {}
        self.cursor_line = 1
        self.mode = "n"
        self.errors: list[str] = []
        self.cleared_messages = 0
        self.prompts: list[tuple[str, list[str]]] = []
        self.choices: list[int | None] = []
        self.subscribers: dict[EventName, list[EventHandler]] = defaultdict(list)
        self.deferred: list[tuple[float, Callable[[], None]]] = []
        self._next_buffer = 1
        self._next_window = 1
        self.edit_window = self.new_window()
        self._current = self.edit_window
        self._previous = self.edit_window

    # Test and CLI helpers

    def add_buffer(self, name: str, loaded: bool = True) -> int:
        ref = self._next_buffer
        self._next_buffer += 1
        self.buffers[ref] = MemoryBuffer(name=name, loaded=loaded)
        return ref

    def buffer_for_name(self, name: str, loaded: bool = True) -> int:
        for ref, buffer in self.buffers.items():
            if buffer.name == name:
                return ref
        return self.add_buffer(name, loaded=loaded)

    def unload_buffer(self, ref: int) -> None:
        self.buffers[ref].loaded = False

    def new_window(self, buffer: int | None = None) -> int:
        handle = self._next_window
        self._next_window += 1
        self.windows.add(handle)
        self.window_buffers[handle] = buffer
        return handle

    def split(self) -> int:
        """Open a new edit window showing the current buffer and focus it."""
        handle = self.new_window(self.window_buffers.get(self.edit_window))
        self._focus(handle)
        return handle

    def current_buffer(self) -> int | None:
        return self.window_buffers.get(self._current)

    def edit(self, ref: int, line: int = 1) -> None:
        """Show ``ref`` in the edit window and place the cursor on ``line``."""
        self.window_buffers[self.edit_window] = ref
        self.cursor_line = line

    def emit(self, event: EventName, payload: object = None) -> None:
        for handler in list(self.subscribers[event]):
            handler(payload)

    def run_deferred(self) -> int:
        """Run queued deferred callbacks in order; returns how many ran."""
        pending, self.deferred = self.deferred, []
        for _delay, callback in pending:
            callback()
        return len(pending)

    def selected_index(self, kind: ListKind) -> int:
        return self._list(kind).selected

    def _focus(self, handle: int) -> None:
        if handle == self._current:
            return
        self._previous = self._current
        self._current = handle
        if handle not in self.surface_keys:
            self.edit_window = handle

    def _owner(self) -> int:
        key = self.surface_keys.get(self._current)
        if key is not None and key[0] is ListKind.SECONDARY and key[1] is not None:
            return key[1]
        return self.edit_window

    def _key(self, kind: ListKind) -> ListKey:
        if kind is ListKind.PRIMARY:
            return (kind, None)
        return (kind, self._owner())

    def _list(self, kind: ListKind) -> MemoryList:
        if kind is ListKind.PRIMARY:
            return self.primary
        return self.location_lists.setdefault(self._owner(), MemoryList())

    def _valid(self, entry: Entry) -> bool:
        return entry.line >= 1 and self.buffer_loaded(entry.owner_ref)

    # Host protocol

    def cursor_position(self) -> tuple[object, int]:
        return self.current_buffer(), self.cursor_line

    def buffer_loaded(self, ref: object) -> bool:
        buffer = self.buffers.get(ref) if isinstance(ref, int) else None
        return buffer is not None and buffer.loaded

    def buffer_name(self, ref: object) -> str:
        buffer = self.buffers.get(ref) if isinstance(ref, int) else None
        return buffer.name if buffer is not None else ""

    def in_normal_mode(self) -> bool:
        return self.mode == "n"

    def list_items(self, kind: ListKind) -> Sequence[Entry]:
        return list(self._list(kind).items)

    def list_title(self, kind: ListKind) -> str:
        return self._list(kind).title

    def replace_list_items(self, kind: ListKind, items: Sequence[Entry], title: str | None = None) -> None:
        target = self._list(kind)
        target.items = list(items)
        target.selected = 0
        if title is not None:
            target.title = title

    def set_list_title(self, kind: ListKind, title: str) -> None:
        self._list(kind).title = title

    def entries_from_lines(self, kind: ListKind, lines: Sequence[str]) -> list[Entry]:
        """Parse ``path:line[:column]: [kind:] text`` lines.

        Lines that do not match become invalid entries carrying the raw text.
        """
        del kind
        entries: list[Entry] = []
        for raw in lines:
            match = _LINE_PATTERN.match(raw.rstrip("\r\n"))
            if match is None:
                entries.append(Entry(owner_ref=None, line=0, text=raw.rstrip("\r\n")))
                continue
            path = match.group("path")
            entries.append(
                Entry(
                    owner_ref=self.buffer_for_name(path),
                    line=int(match.group("line")),
                    column=int(match.group("column") or 0),
                    text=match.group("text"),
                    kind=EntryKind.from_code(match.group("kind")),
                    file_name=path,
                )
            )
        return entries

    def select_entry(self, kind: ListKind, index: int) -> None:
        self._list(kind).selected = index

    def jump_to_entry(self, kind: ListKind, index: int) -> None:
        target = self._list(kind)
        target.selected = index
        entry = target.items[index]
        self._focus(self.edit_window)
        if isinstance(entry.owner_ref, int):
            self.window_buffers[self.edit_window] = entry.owner_ref
        self.cursor_line = max(1, entry.line)

    def step_entry(self, kind: ListKind, direction: int) -> int | None:
        target = self._list(kind)
        idx = target.selected + direction
        while 0 <= idx < len(target.items):
            if self._valid(target.items[idx]):
                self.jump_to_entry(kind, idx)
                return idx
            idx += direction
        return None

    def surface_state(self, kind: ListKind) -> SurfaceState:
        handle = self.surfaces.get(self._key(kind))
        if handle is None:
            return CLOSED_SURFACE
        return SurfaceState(is_open=True, handle=handle)

    def open_surface(self, kind: ListKind, height: int) -> object:
        key = self._key(kind)
        handle = self.surfaces.get(key)
        if handle is None:
            handle = self.new_window()
            self.surfaces[key] = handle
            self.surface_keys[handle] = key
        self.heights[handle] = height
        return handle

    def close_surface(self, kind: ListKind) -> None:
        handle = self.surfaces.pop(self._key(kind), None)
        if handle is None:
            return
        del self.surface_keys[handle]
        self.windows.discard(handle)
        self.window_buffers.pop(handle, None)
        self.heights.pop(handle, None)
        self.surface_options.pop(handle, None)
        if self._current == handle:
            self._current = self.edit_window
        if self._previous == handle:
            self._previous = self.edit_window

    def resize_surface(self, handle: object, height: int) -> None:
        if isinstance(handle, int) and handle in self.windows:
            self.heights[handle] = height

    def focus_surface(self, handle: object) -> None:
        if isinstance(handle, int) and handle in self.windows:
            self._focus(handle)

    def configure_surface(self, handle: object, options: SurfaceOptions) -> None:
        if not isinstance(handle, int):
            return
        self.surface_options[handle] = options
        if options.height:
            self.heights[handle] = options.height

    def current_window(self) -> object:
        return self._current

    def previous_window(self) -> object:
        return self._previous

    def is_list_surface(self, handle: object) -> bool:
        return handle in self.surface_keys

    def report_error(self, message: str) -> None:
        self.errors.append(message)

    def clear_message(self) -> None:
        self.cleared_messages += 1

    def confirm_choice(self, prompt: str, options: Sequence[str]) -> int | None:
        self.prompts.append((prompt, list(options)))
        if not self.choices:
            return None
        return self.choices.pop(0)

    def subscribe(self, event: EventName, handler: EventHandler) -> None:
        self.subscribers[event].append(handler)

    def defer(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        self.deferred.append((delay_seconds, callback))


__all__ = ["MemoryBuffer", "MemoryHost", "MemoryList"]
