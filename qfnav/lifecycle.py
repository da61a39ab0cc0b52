"""Open/close/resize state machine for list surfaces.

A list is ``Closed`` or open (focused or not); the open state is always
queried from the host, never cached here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import EngineConfig
from .entries import ListKind, list_items
from .height import compute_height
from .host import Host, SurfaceOptions

logger = logging.getLogger(__name__)

NO_ITEMS_MESSAGE = "No items"


class LifecycleOps:
    def __init__(
        self,
        host: Host,
        config: EngineConfig,
        *,
        save_items: Callable[[ListKind, str], None],
        reset_follow: Callable[[ListKind], None],
    ) -> None:
        self.host = host
        self.config = config
        self._save_items = save_items
        self._reset_follow = reset_follow

    def height_for(self, kind: ListKind) -> int:
        return compute_height(len(list_items(self.host, kind)), self.config.for_kind(kind))

    def is_open(self, kind: ListKind) -> bool:
        return self.host.surface_state(kind).is_open

    def setup_surface(self, kind: ListKind, handle: object) -> None:
        """Apply window options to a freshly materialized list surface."""
        options = self.config.for_kind(kind)
        height = self.height_for(kind) if options.auto_resize else None
        self.host.configure_surface(
            handle,
            SurfaceOptions(
                number=options.number,
                relative_number=options.relative_number,
                fixed_height=True,
                height=height or None,
                wide=options.wide,
            ),
        )

    def open(self, kind: ListKind, stay: bool = False, silent: bool = False) -> bool:
        """Open the list surface, or focus it if already open.

        An empty list reports "No items" (unless ``silent``) and closes when
        ``auto_close`` is set. ``stay`` keeps input focus where it is.
        Returns whether the surface is open afterwards.
        """
        host = self.host
        options = self.config.for_kind(kind)
        item_count = len(list_items(host, kind))
        if item_count == 0:
            if not silent:
                host.report_error(NO_ITEMS_MESSAGE)
            if options.auto_close:
                self.close(kind)
                return False
            return self.is_open(kind)

        if self.config.close_other:
            self.close(kind.other)

        state = host.surface_state(kind)
        if state.is_open:
            if not stay:
                host.focus_surface(state.handle)
            return True

        height = compute_height(item_count, options)
        handle = host.open_surface(kind, height)
        self.setup_surface(kind, handle)
        logger.debug("opened %s surface at height %d", kind.name, height)
        if not stay:
            host.focus_surface(handle)
        return True

    def close(self, kind: ListKind) -> None:
        self.host.close_surface(kind)
        logger.debug("closed %s surface", kind.name)

    def toggle(self, kind: ListKind, stay: bool = False) -> bool:
        """Close the list if open, otherwise open it. Returns the new open state."""
        if self.is_open(kind):
            self.close(kind)
            return False
        return self.open(kind, stay=stay)

    def resize(self, kind: ListKind) -> None:
        """Fit an open surface to its item count; closes it when empty and ``auto_close``."""
        state = self.host.surface_state(kind)
        if not state.is_open:
            return
        height = self.height_for(kind)
        if height != 0:
            self.host.resize_surface(state.handle, height)
        elif self.config.for_kind(kind).auto_close:
            self.close(kind)

    def reopen(self, kind: ListKind) -> bool:
        """Close and reopen a list surface at its computed height.

        Repairs a surface stretched by a new split. Only runs when both the
        current and the previous window are list surfaces. Focus goes back to
        the window that had it, or to the new surface if that was the one.
        A list with no valid entries is closed (with ``auto_close``) instead.
        """
        host = self.host
        focused = host.current_window()
        if not host.is_list_surface(focused):
            return False
        if not host.is_list_surface(host.previous_window()):
            return False
        state = host.surface_state(kind)
        if not state.is_open:
            return False
        height = self.height_for(kind)
        if height == 0:
            if self.config.for_kind(kind).auto_close:
                self.close(kind)
            return False

        host.close_surface(kind)
        handle = host.open_surface(kind, height)
        self.setup_surface(kind, handle)
        host.focus_surface(handle if focused == state.handle else focused)
        logger.debug("reopened %s surface", kind.name)
        return True

    def reopen_all(self) -> None:
        for kind in ListKind:
            self.reopen(kind)

    def clear(self, kind: ListKind, name: str | None = None) -> None:
        """Empty the list, archiving it under ``name`` first when given."""
        if name:
            self._save_items(kind, name)
        self.host.replace_list_items(kind, [])
        self._reset_follow(kind)
        self.open(kind, stay=True, silent=True)


__all__ = ["LifecycleOps", "NO_ITEMS_MESSAGE"]
