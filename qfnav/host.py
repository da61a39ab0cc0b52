"""Host editor contract consumed by the engine.

The engine never touches windows, buffers, or the command line directly.
Everything goes through this protocol so any editor (or ``MemoryHost``) can
drive it. Entry indices are 0-based.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .entries import Entry, ListKind


class EventName(Enum):
    CURSOR_MOVED = "cursor-moved"
    CURSOR_IDLE = "cursor-idle"
    WINDOW_FOCUS_GAINED = "window-focus-gained"
    WINDOW_FOCUS_LOST = "window-focus-lost"
    COMMAND_COMPLETED = "command-completed"
    WINDOW_NEW = "window-new"


@dataclass(frozen=True)
class SurfaceState:
    """Whether a list's surface is open, and its window handle when it is."""

    is_open: bool
    handle: object = None


CLOSED_SURFACE = SurfaceState(is_open=False)


@dataclass(frozen=True)
class SurfaceOptions:
    """Window-local options applied when a list surface is materialized."""

    number: bool = False
    relative_number: bool = False
    fixed_height: bool = True
    height: int | None = None
    wide: bool = False


EventHandler = Callable[[object], None]


class Host(Protocol):
    def cursor_position(self) -> tuple[object, int]: ...

    def buffer_loaded(self, ref: object) -> bool: ...

    def buffer_name(self, ref: object) -> str: ...

    def in_normal_mode(self) -> bool: ...

    def list_items(self, kind: ListKind) -> Sequence[Entry]: ...

    def list_title(self, kind: ListKind) -> str: ...

    def replace_list_items(self, kind: ListKind, items: Sequence[Entry], title: str | None = None) -> None: ...

    def set_list_title(self, kind: ListKind, title: str) -> None: ...

    def entries_from_lines(self, kind: ListKind, lines: Sequence[str]) -> list[Entry]: ...

    def select_entry(self, kind: ListKind, index: int) -> None: ...

    def jump_to_entry(self, kind: ListKind, index: int) -> None: ...

    def step_entry(self, kind: ListKind, direction: int) -> int | None: ...

    def surface_state(self, kind: ListKind) -> SurfaceState: ...

    def open_surface(self, kind: ListKind, height: int) -> object: ...

    def close_surface(self, kind: ListKind) -> None: ...

    def resize_surface(self, handle: object, height: int) -> None: ...

    def focus_surface(self, handle: object) -> None: ...

    def configure_surface(self, handle: object, options: SurfaceOptions) -> None: ...

    def current_window(self) -> object: ...

    def previous_window(self) -> object: ...

    def is_list_surface(self, handle: object) -> bool: ...

    def report_error(self, message: str) -> None: ...

    def clear_message(self) -> None: ...

    def confirm_choice(self, prompt: str, options: Sequence[str]) -> int | None: ...

    def subscribe(self, event: EventName, handler: EventHandler) -> None: ...

    def defer(self, delay_seconds: float, callback: Callable[[], None]) -> None: ...


__all__ = [
    "CLOSED_SURFACE",
    "EventHandler",
    "EventName",
    "Host",
    "SurfaceOptions",
    "SurfaceState",
]
