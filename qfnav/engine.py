"""Process-scoped engine context and the command surface exposed to hosts.

``setup`` builds one ``QfEngine`` per host: configuration, the archive, the
per-list follow memos, and the event table all live on it rather than in
module globals.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from .archive import Archive, EntryFilter, ListEditOps
from .config import EngineConfig, FollowStrategy
from .entries import Entry, EntryKind, ListKind, resolve_list_kind
from .events import EventTable, ListCommands, build_event_table
from .follow import FollowOps, FollowState
from .host import Host
from .lifecycle import LifecycleOps
from .navigation import NavigationOps, NavResult

logger = logging.getLogger(__name__)

ListRef = ListKind | str


class QfEngine:
    def __init__(self, host: Host, config: EngineConfig | None = None, archive: Archive | None = None) -> None:
        self.host = host
        self.config = config if config is not None else EngineConfig()
        self.archive = archive if archive is not None else Archive()
        self.follow_states: dict[ListKind, FollowState] = {kind: FollowState() for kind in ListKind}
        self._follow = FollowOps(host=host, config=self.config, states=self.follow_states)
        self._navigation = NavigationOps(host=host)
        self._lifecycle = LifecycleOps(
            host,
            self.config,
            save_items=self._save_items,
            reset_follow=self._reset_follow,
        )
        self._edits = ListEditOps(
            host,
            self.config,
            self.archive,
            open_list=self._lifecycle.open,
            close_list=self._lifecycle.close,
            reset_follow=self._reset_follow,
        )
        self.events: EventTable = build_event_table(
            self.config,
            host,
            ListCommands(
                follow=self._follow.follow,
                open=self._lifecycle.open,
                close=self._lifecycle.close,
                reopen=self._lifecycle.reopen,
                reset_follow=self._reset_follow,
            ),
        )

    def _kind(self, ref: ListRef) -> ListKind:
        return resolve_list_kind(ref, self.host)

    def _save_items(self, kind: ListKind, name: str) -> None:
        self._edits.save(kind, name)

    def _reset_follow(self, kind: ListKind) -> None:
        self.follow_states[kind].reset()

    # Lifecycle

    def open(self, ref: ListRef, stay: bool = False, silent: bool = False) -> bool:
        return self._lifecycle.open(self._kind(ref), stay=stay, silent=silent)

    def close(self, ref: ListRef) -> None:
        self._lifecycle.close(self._kind(ref))

    def toggle(self, ref: ListRef, stay: bool = False) -> bool:
        return self._lifecycle.toggle(self._kind(ref), stay=stay)

    def clear(self, ref: ListRef, name: str | None = None) -> None:
        self._lifecycle.clear(self._kind(ref), name)

    def resize(self, ref: ListRef) -> None:
        self._lifecycle.resize(self._kind(ref))

    def reopen(self, ref: ListRef) -> bool:
        return self._lifecycle.reopen(self._kind(ref))

    def reopen_all(self) -> None:
        self._lifecycle.reopen_all()

    # Follow and navigation

    def follow(
        self,
        ref: ListRef,
        strategy: FollowStrategy | str | None = None,
        limit: int | bool | None = None,
    ) -> bool:
        return self._follow.follow(self._kind(ref), strategy, limit)

    def next(self, ref: ListRef, wrap: bool = True, verbose: bool = True) -> NavResult:
        return self._navigation.next(self._kind(ref), wrap=wrap, verbose=verbose)

    def prev(self, ref: ListRef, wrap: bool = True, verbose: bool = True) -> NavResult:
        return self._navigation.prev(self._kind(ref), wrap=wrap, verbose=verbose)

    def above(self, ref: ListRef, wrap: bool = True, verbose: bool = True) -> NavResult:
        return self._navigation.above(self._kind(ref), wrap=wrap, verbose=verbose)

    def below(self, ref: ListRef, wrap: bool = True, verbose: bool = True) -> NavResult:
        return self._navigation.below(self._kind(ref), wrap=wrap, verbose=verbose)

    # Contents

    def set(
        self,
        ref: ListRef,
        *,
        items: Sequence[Entry] | None = None,
        lines: Sequence[str] | None = None,
        title: str | None = None,
        tally: bool = False,
        open: bool = True,
    ) -> bool:
        return self._edits.set(self._kind(ref), items=items, lines=lines, title=title, tally=tally, open=open)

    def tally(self, ref: ListRef, title: str | None = None) -> str:
        return self._edits.tally(self._kind(ref), title)

    def keep(self, ref: ListRef, kind: EntryKind | str | None = None, text: str | None = None) -> int:
        entry_kind = None if kind is None else EntryKind.from_code(kind)
        return self._edits.keep(self._kind(ref), EntryFilter(kind=entry_kind, text=text))

    def sort(self, ref: ListRef) -> None:
        self._edits.sort(self._kind(ref))

    def save(self, ref: ListRef, name: str) -> None:
        self._edits.save(self._kind(ref), name)

    def load(self, ref: ListRef, name: str | None = None) -> bool:
        return self._edits.load(self._kind(ref), name)


def setup(host: Host, config: EngineConfig | Mapping[str, object] | None = None) -> QfEngine:
    """Create the engine for ``host`` and subscribe its event handlers.

    ``config`` may be an ``EngineConfig`` or the raw nested mapping accepted
    by ``EngineConfig.from_mapping``.
    """
    if config is None or isinstance(config, EngineConfig):
        engine_config = config
    else:
        engine_config = EngineConfig.from_mapping(config)
    engine = QfEngine(host, engine_config)
    engine.events.attach(host)
    logger.debug("qfnav set up with events %s", [event.value for event in engine.events.events()])
    return engine


__all__ = ["QfEngine", "setup"]
